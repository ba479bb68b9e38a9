"""Read models for persisted matches — immutable, nested, serialisable."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AffectedSymbol(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    symbols: tuple[str, ...] = ()


class AffectedPackage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    vulnerability_id: int
    package_name: str
    language: str
    namespace: str
    version_constraint: tuple[str, ...] = ()
    fixed: bool = False
    fixed_in: str | None = None
    affected_symbols: tuple[AffectedSymbol, ...] = ()

    def with_symbol(self, symbol: AffectedSymbol) -> AffectedPackage:
        return self.model_copy(update={"affected_symbols": (*self.affected_symbols, symbol)})


class VulnerabilityMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    upload_id: int
    vulnerability_id: int | None = None
    affected_package: AffectedPackage | None = None


class MatchPage(BaseModel):
    """One page of matches plus the total independent of limit/offset.

    ``limit`` is the page size actually applied, which is lower than the
    requested one when that exceeded ``PAGE_SIZE_MAX``.
    """

    data: list[VulnerabilityMatch]
    total: int
    limit: int
