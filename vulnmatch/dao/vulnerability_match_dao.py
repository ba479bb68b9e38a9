"""VulnerabilityMatchDAO — vulnerability_matches table operations."""

from collections.abc import Iterable, Sequence

from sqlalchemy import Integer, Row, Select, and_, func, literal, or_, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from vulnmatch.dao.base import BaseDAO
from vulnmatch.engines.match_scanner.models import MatchCandidate
from vulnmatch.models.affected_package import AffectedPackage
from vulnmatch.models.affected_symbol import AffectedSymbol
from vulnmatch.models.package_reference import PackageReference
from vulnmatch.models.vulnerability_match import VulnerabilityMatch

# Bind parameter ceiling of a single statement on the PostgreSQL wire protocol
# as enforced by asyncpg.
MAX_POSTGRES_PARAMETERS = 32767

_INSERT_COLUMNS = ("upload_id", "vulnerability_affected_package_id")
MAX_INSERT_BATCH = MAX_POSTGRES_PARAMETERS // len(_INSERT_COLUMNS)


def _affected_columns(match_id, upload_id, total_count) -> tuple:
    """Column list shared by the single-match and page queries."""
    return (
        match_id.label("id"),
        upload_id.label("upload_id"),
        AffectedPackage.vulnerability_id,
        AffectedPackage.id.label("affected_package_id"),
        AffectedPackage.package_name,
        AffectedPackage.language,
        AffectedPackage.namespace,
        AffectedPackage.version_constraint,
        AffectedPackage.fixed,
        AffectedPackage.fixed_in,
        AffectedSymbol.path.label("symbol_path"),
        AffectedSymbol.symbols,
        total_count.label("total_count"),
    )


class VulnerabilityMatchDAO(BaseDAO[VulnerabilityMatch]):
    model = VulnerabilityMatch

    # ── scan ──────────────────────────────────────────────────────────────

    @staticmethod
    def candidates_query(conditions: Sequence[tuple[str, str]]) -> Select:
        """References whose name contains an affected package name.

        Only ``(scheme, language)`` combinations listed in *conditions* join.
        The substring test is a coarse pre-filter; version checks happen in
        Python afterwards.
        """
        ref = PackageReference
        vap = AffectedPackage
        return (
            select(
                ref.upload_id,
                vap.id.label("affected_package_id"),
                ref.version,
                vap.version_constraint,
            )
            .select_from(vap)
            .join(ref, ref.name.contains(vap.package_name))
            .where(or_(*[and_(ref.scheme == s, vap.language == lang) for s, lang in conditions]))
            .order_by(ref.upload_id, vap.id, ref.id)
        )

    async def list_candidates(
        self,
        session: AsyncSession,
        conditions: Sequence[tuple[str, str]],
    ) -> list[MatchCandidate]:
        """Return every (reference, affected package) pre-filter hit."""
        if not conditions:
            return []
        result = await session.execute(self.candidates_query(conditions))
        return [
            MatchCandidate(
                upload_id=row.upload_id,
                affected_package_id=row.affected_package_id,
                version=row.version,
                version_constraint=list(row.version_constraint or []),
            )
            for row in result
        ]

    async def insert_ignore_duplicates(
        self,
        session: AsyncSession,
        pairs: Iterable[tuple[int, int]],
        batch_size: int = MAX_INSERT_BATCH,
    ) -> int:
        """Insert ``(upload_id, affected_package_id)`` pairs in bounded chunks.

        Pairs already present are skipped via ON CONFLICT DO NOTHING.  Runs in
        the caller's transaction; returns the number of rows actually inserted.
        """
        batch_size = max(1, min(batch_size, MAX_INSERT_BATCH))
        inserted = 0
        chunk: list[dict[str, int]] = []
        for upload_id, affected_package_id in pairs:
            chunk.append(dict(zip(_INSERT_COLUMNS, (upload_id, affected_package_id))))
            if len(chunk) >= batch_size:
                inserted += await self._insert_chunk(session, chunk)
                chunk = []
        if chunk:
            inserted += await self._insert_chunk(session, chunk)
        return inserted

    @staticmethod
    async def _insert_chunk(session: AsyncSession, chunk: list[dict[str, int]]) -> int:
        table = VulnerabilityMatch.__table__
        stmt = (
            insert(table)
            .values(chunk)
            .on_conflict_do_nothing(constraint="uq_vulnmatches_upload_package")
            .returning(table.c.id)
        )
        result = await session.execute(stmt)
        return len(result.all())

    # ── read ──────────────────────────────────────────────────────────────

    async def get_match_rows(self, session: AsyncSession, match_id: int) -> Sequence[Row]:
        """Flattened rows for one match: one per affected symbol (at least one)."""
        self._require_pk(match_id)
        m = VulnerabilityMatch
        stmt = (
            select(*_affected_columns(m.id, m.upload_id, literal(0, Integer)))
            .select_from(m)
            .outerjoin(AffectedPackage, AffectedPackage.id == m.affected_package_id)
            .outerjoin(AffectedSymbol, AffectedSymbol.affected_package_id == AffectedPackage.id)
            .where(m.id == match_id)
            .order_by(AffectedPackage.id, AffectedSymbol.id)
        )
        result = await session.execute(stmt)
        return result.all()

    async def list_match_rows(
        self,
        session: AsyncSession,
        limit: int,
        offset: int,
    ) -> Sequence[Row]:
        """Flattened rows for a page of matches ordered by match id.

        The page is cut on matches (not on joined rows) and every row carries
        the total match count, computed before LIMIT/OFFSET apply.
        """
        m = VulnerabilityMatch
        limited = (
            select(
                m.id.label("id"),
                m.upload_id.label("upload_id"),
                m.affected_package_id.label("affected_package_id"),
                func.count().over().label("total_count"),
            )
            .order_by(m.id)
            .limit(limit)
            .offset(offset)
            .cte("limited_matches")
        )
        stmt = (
            select(*_affected_columns(limited.c.id, limited.c.upload_id, limited.c.total_count))
            .select_from(limited)
            .outerjoin(AffectedPackage, AffectedPackage.id == limited.c.affected_package_id)
            .outerjoin(AffectedSymbol, AffectedSymbol.affected_package_id == AffectedPackage.id)
            .order_by(limited.c.id, AffectedPackage.id, AffectedSymbol.id)
        )
        result = await session.execute(stmt)
        return result.all()

    async def list_pairs(self, session: AsyncSession) -> list[tuple[int, int]]:
        """All persisted ``(upload_id, affected_package_id)`` pairs, ordered."""
        m = VulnerabilityMatch
        stmt = select(
            m.upload_id.label("upload_id"),
            m.affected_package_id.label("affected_package_id"),
        ).order_by(m.upload_id, m.affected_package_id)
        result = await session.execute(stmt)
        return [(row.upload_id, row.affected_package_id) for row in result]
