"""MatchScanner — find new upload ↔ affected package matches and persist them."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from vulnmatch.engines.match_scanner.constraints import version_matches_constraints
from vulnmatch.engines.match_scanner.models import MatchCandidate, ScanResult
from vulnmatch.engines.match_scanner.schemes import SchemeMapping

if TYPE_CHECKING:
    from vulnmatch.dao.vulnerability_match_dao import VulnerabilityMatchDAO

log = structlog.get_logger("vulnmatch.engine")


def filter_candidates(
    candidates: list[MatchCandidate],
) -> tuple[list[tuple[int, int]], int]:
    """Keep candidates whose version satisfies the affected range.

    Returns the distinct ``(upload_id, affected_package_id)`` pairs in
    encounter order and the number of candidates that failed to parse.
    """
    pairs: dict[tuple[int, int], None] = {}
    invalid = 0
    for c in candidates:
        matches, valid = version_matches_constraints(c.version, c.version_constraint)
        if not valid:
            invalid += 1
            log.warning(
                "scan.invalid_candidate",
                upload_id=c.upload_id,
                affected_package_id=c.affected_package_id,
                version=c.version,
                version_constraint=c.version_constraint,
            )
            continue
        if matches:
            pairs[(c.upload_id, c.affected_package_id)] = None
    return list(pairs), invalid


class MatchScanner:
    """Scan every package reference against the vulnerability catalog."""

    def __init__(
        self,
        match_dao: VulnerabilityMatchDAO,
        schemes: SchemeMapping | None = None,
        batch_size: int | None = None,
    ) -> None:
        self._dao = match_dao
        self._schemes = schemes if schemes is not None else SchemeMapping()
        self._batch_size = batch_size

    async def scan(self, session: AsyncSession) -> ScanResult:
        """One scan pass inside the caller's transaction.

        Unparseable versions or ranges are logged and skipped; everything else
        (DB errors, cancellation) propagates so the caller's transaction aborts.
        """
        candidates = await self._dao.list_candidates(session, self._schemes.conditions())
        pairs, invalid = filter_candidates(candidates)

        if pairs:
            kwargs = {} if self._batch_size is None else {"batch_size": self._batch_size}
            inserted = await self._dao.insert_ignore_duplicates(session, pairs, **kwargs)
        else:
            inserted = 0

        return ScanResult(
            candidates=len(candidates),
            matched=len(pairs),
            invalid=invalid,
            inserted=inserted,
        )

    async def run(self, session_factory: async_sessionmaker[AsyncSession]) -> int:
        """Run :meth:`scan` in its own transaction and commit.

        Either every new match of this run is persisted or none is.
        Returns the number of newly inserted matches.
        """
        async with session_factory() as session:
            async with session.begin():
                result = await self.scan(session)

        log.info(
            "scan.completed",
            candidates=result.candidates,
            matched=result.matched,
            invalid=result.invalid,
            inserted=result.inserted,
        )
        return result.inserted
