"""Fold flattened match ⟕ package ⟕ symbol rows back into nested matches.

The left joins produce one row per (match, symbol); a match without symbols
(or without a package) still yields one row with NULL right-hand columns.
Rows must arrive ordered by match id so that a match's rows are adjacent.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol

from vulnmatch.engines.match_query.models import (
    AffectedPackage,
    AffectedSymbol,
    VulnerabilityMatch,
)


class MatchRow(Protocol):
    """Columns selected by ``VulnerabilityMatchDAO`` read queries."""

    id: int
    upload_id: int
    vulnerability_id: int | None
    affected_package_id: int | None
    package_name: str | None
    language: str | None
    namespace: str | None
    version_constraint: list[str] | None
    fixed: bool | None
    fixed_in: str | None
    symbol_path: str | None
    symbols: list[str] | None
    total_count: int


def package_from_row(row: MatchRow) -> AffectedPackage | None:
    """Right-hand package columns, or None on a left-join miss."""
    if not row.package_name:
        return None
    return AffectedPackage(
        id=row.affected_package_id,
        vulnerability_id=row.vulnerability_id,
        package_name=row.package_name,
        language=row.language or "",
        namespace=row.namespace or "",
        version_constraint=tuple(row.version_constraint or ()),
        fixed=bool(row.fixed),
        fixed_in=row.fixed_in or None,
    )


def symbol_from_row(row: MatchRow) -> AffectedSymbol | None:
    if not row.symbol_path:
        return None
    return AffectedSymbol(path=row.symbol_path, symbols=tuple(row.symbols or ()))


def _merge(current: VulnerabilityMatch, row: MatchRow) -> VulnerabilityMatch:
    """Fold one more row of the same match into *current*."""
    package = current.affected_package
    if package is None:
        package = package_from_row(row)
        if package is None:
            return current
    symbol = symbol_from_row(row)
    if symbol is not None:
        package = package.with_symbol(symbol)
    update: dict = {"affected_package": package}
    if current.vulnerability_id is None:
        update["vulnerability_id"] = package.vulnerability_id
    return current.model_copy(update=update)


def assemble_matches(rows: Iterable[MatchRow]) -> tuple[list[VulnerabilityMatch], int]:
    """Return ``(matches, total_count)`` from ordered flattened rows.

    A new match starts whenever the match id changes; output keeps
    encounter order.  ``total_count`` is read from the rows (0 if none).
    """
    matches: list[VulnerabilityMatch] = []
    total_count = 0
    current: VulnerabilityMatch | None = None

    for row in rows:
        total_count = row.total_count
        if current is None or current.id != row.id:
            if current is not None:
                matches.append(current)
            current = VulnerabilityMatch(
                id=row.id,
                upload_id=row.upload_id,
                vulnerability_id=row.vulnerability_id,
            )
        current = _merge(current, row)

    if current is not None:
        matches.append(current)
    return matches, total_count
