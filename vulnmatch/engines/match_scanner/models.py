"""Data models for the match scanner engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class MatchCandidate:
    """A reference whose name contains an affected package name (pre-filter hit)."""

    upload_id: int
    affected_package_id: int
    version: str
    version_constraint: list[str]


@dataclass
class ScanResult:
    """Outcome of one scan pass."""

    candidates: int
    matched: int
    invalid: int
    inserted: int
