"""package_references table (written by the upload indexer, read-only here)."""

from sqlalchemy import Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from vulnmatch.core.database import Base


class PackageReference(Base):
    __tablename__ = "package_references"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    upload_id: Mapped[int] = mapped_column(Integer, nullable=False)
    scheme: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("idx_pkgrefs_upload", "upload_id"),
        Index("idx_pkgrefs_scheme_name", "scheme", "name"),
    )
