"""vulnerability_affected_symbols table."""

from sqlalchemy import ForeignKey, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vulnmatch.core.database import Base


class AffectedSymbol(Base):
    __tablename__ = "vulnerability_affected_symbols"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    affected_package_id: Mapped[int] = mapped_column(
        "vulnerability_affected_package_id",
        Integer,
        ForeignKey("vulnerability_affected_packages.id", ondelete="CASCADE"),
        nullable=False,
    )
    path: Mapped[str] = mapped_column(Text, nullable=False)
    symbols: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'")
    )

    affected_package: Mapped["AffectedPackage"] = relationship(  # noqa: F821
        back_populates="affected_symbols"
    )

    __table_args__ = (Index("idx_vas_affected_package", "vulnerability_affected_package_id"),)
