"""Match query engine — rebuild nested matches from flattened join rows."""

from vulnmatch.engines.match_query.assembler import assemble_matches
from vulnmatch.engines.match_query.models import (
    AffectedPackage,
    AffectedSymbol,
    MatchPage,
    VulnerabilityMatch,
)

__all__ = [
    "AffectedPackage",
    "AffectedSymbol",
    "MatchPage",
    "VulnerabilityMatch",
    "assemble_matches",
]
