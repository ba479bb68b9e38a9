"""SQLAlchemy ORM models — one file per table."""

from vulnmatch.models.affected_package import AffectedPackage
from vulnmatch.models.affected_symbol import AffectedSymbol
from vulnmatch.models.package_reference import PackageReference
from vulnmatch.models.vulnerability import Vulnerability
from vulnmatch.models.vulnerability_match import VulnerabilityMatch

__all__ = [
    "PackageReference",
    "Vulnerability",
    "AffectedPackage",
    "AffectedSymbol",
    "VulnerabilityMatch",
]
