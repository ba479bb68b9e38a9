"""VulnerabilityMatchService — match lookup, paginated listing, scan trigger."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vulnmatch.dao.base import PAGE_SIZE_DEFAULT, clamp_page_size
from vulnmatch.dao.vulnerability_match_dao import VulnerabilityMatchDAO
from vulnmatch.engines.match_query.assembler import assemble_matches
from vulnmatch.engines.match_query.models import MatchPage, VulnerabilityMatch
from vulnmatch.engines.match_scanner.scanner import MatchScanner
from vulnmatch.services import NotFoundError, ValidationError


class VulnerabilityMatchService:
    """Stateless service over the vulnerability_matches table."""

    def __init__(self, match_dao: VulnerabilityMatchDAO, scanner: MatchScanner) -> None:
        self._dao = match_dao
        self._scanner = scanner

    # ── reads ─────────────────────────────────────────────────────────────

    async def get_match(self, session: AsyncSession, match_id: int) -> VulnerabilityMatch | None:
        """Return the fully assembled match, or None if no such row exists."""
        rows = await self._dao.get_match_rows(session, match_id)
        matches, _ = assemble_matches(rows)
        if not matches:
            return None
        return matches[0]

    async def require_match(self, session: AsyncSession, match_id: int) -> VulnerabilityMatch:
        """Like :meth:`get_match` but raises :class:`NotFoundError` when absent."""
        match = await self.get_match(session, match_id)
        if match is None:
            raise NotFoundError(f"vulnerability match {match_id} not found")
        return match

    async def list_matches(
        self,
        session: AsyncSession,
        limit: int = PAGE_SIZE_DEFAULT,
        offset: int = 0,
    ) -> MatchPage:
        """Return a page of matches ordered by id, plus the total match count.

        Raises :class:`ValidationError` if *limit* < 1 or *offset* < 0.
        *limit* above ``PAGE_SIZE_MAX`` is clamped to it; the page size
        actually used is returned as ``MatchPage.limit``.
        """
        if limit < 1:
            raise ValidationError(f"limit must be positive, got {limit}")
        if offset < 0:
            raise ValidationError(f"offset must not be negative, got {offset}")

        page_size = clamp_page_size(limit)
        rows = await self._dao.list_match_rows(session, page_size, offset)
        matches, total = assemble_matches(rows)
        if not matches and offset > 0:
            # Page past the end: no row carried the window count.
            total = await self._dao.count(session)
        return MatchPage(data=matches, total=total, limit=page_size)

    # ── scan ──────────────────────────────────────────────────────────────

    async def scan(self, session_factory: async_sessionmaker[AsyncSession]) -> int:
        """Run one full scan in its own transaction; return new match count."""
        return await self._scanner.run(session_factory)
