"""vulnerabilities table (catalog header, populated by the feed importer)."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from vulnmatch.core.database import Base


class Vulnerability(Base):
    __tablename__ = "vulnerabilities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    source_id: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    summary: Mapped[Optional[str]] = mapped_column(Text)
    details: Mapped[Optional[str]] = mapped_column(Text)
    published_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    affected_packages: Mapped[list["AffectedPackage"]] = relationship(  # noqa: F821
        back_populates="vulnerability",
        order_by="AffectedPackage.id",
    )
