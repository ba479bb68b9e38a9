"""vulnerability_matches table — the only table this package writes."""

from sqlalchemy import ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from vulnmatch.core.database import Base, CreatedAtMixin


class VulnerabilityMatch(CreatedAtMixin, Base):
    __tablename__ = "vulnerability_matches"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    upload_id: Mapped[int] = mapped_column(Integer, nullable=False)
    affected_package_id: Mapped[int] = mapped_column(
        "vulnerability_affected_package_id",
        Integer,
        ForeignKey("vulnerability_affected_packages.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "upload_id",
            "vulnerability_affected_package_id",
            name="uq_vulnmatches_upload_package",
        ),
        Index("idx_vulnmatches_affected_package", "vulnerability_affected_package_id"),
    )
