"""vulnerability_affected_packages table."""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, Text, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vulnmatch.core.database import Base


class AffectedPackage(Base):
    __tablename__ = "vulnerability_affected_packages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vulnerability_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("vulnerabilities.id", ondelete="CASCADE"),
        nullable=False,
    )
    package_name: Mapped[str] = mapped_column(Text, nullable=False)
    language: Mapped[str] = mapped_column(Text, nullable=False)
    namespace: Mapped[str] = mapped_column(Text, nullable=False, server_default=text("''"))

    # ANDed range expressions, e.g. [">= 1.0.0", "< 1.5.0"]
    version_constraint: Mapped[list[str]] = mapped_column(
        ARRAY(Text), nullable=False, server_default=text("'{}'")
    )
    fixed: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    fixed_in: Mapped[Optional[str]] = mapped_column(Text)

    vulnerability: Mapped["Vulnerability"] = relationship(  # noqa: F821
        back_populates="affected_packages"
    )
    affected_symbols: Mapped[list["AffectedSymbol"]] = relationship(  # noqa: F821
        back_populates="affected_package",
        order_by="AffectedSymbol.id",
    )

    __table_args__ = (
        Index("idx_vap_vulnerability", "vulnerability_id"),
        Index("idx_vap_language_name", "language", "package_name"),
    )
