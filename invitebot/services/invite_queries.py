"""
Aggregate invite queries over the invite tracker tables.

Each query returns typed rows for the leaderboard and member info services.
Database failures and rows that cannot be converted are raised as
DataUnavailableError; nothing is retried.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, List, Optional, TypeVar

from sqlalchemy import select, func, case
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Select

from invitebot.data_models.leaderboard import BonusInviteTotal, CodeInviteTotal, JoinLeaveTimes
from invitebot.data_models.member_info import CustomInviteEntry, JoinRecord, MemberInviteCounts
from invitebot.database.models import CustomInvite, InviteCode, Join, Leave, Member
from invitebot.services.base import BaseService
from invitebot.utils.leaderboard_exceptions import DataUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class InviteQueryService(BaseService):
    """Parameterized aggregate queries used by the invite commands."""

    async def _fetch_all(self, operation: str, statement: Select) -> list:
        try:
            async with self.get_session() as session:
                result = await session.execute(statement)
                return list(result.all())
        except SQLAlchemyError as e:
            logger.error(f"Query {operation} failed: {e}")
            raise DataUnavailableError(operation, str(e)) from e

    async def _fetch_scalar(self, operation: str, statement: Select):
        try:
            async with self.get_session() as session:
                return await session.scalar(statement)
        except SQLAlchemyError as e:
            logger.error(f"Query {operation} failed: {e}")
            raise DataUnavailableError(operation, str(e)) from e

    @staticmethod
    def _convert(operation: str, rows: Iterable, factory: Callable[..., T]) -> List[T]:
        try:
            return [factory(row) for row in rows]
        except (TypeError, ValueError) as e:
            logger.error(f"Query {operation} returned a malformed row: {e}")
            raise DataUnavailableError(operation, f"malformed row: {e}") from e

    @staticmethod
    def _bonus_columns():
        """Sums of manual and generated custom invites."""
        return (
            func.sum(case((CustomInvite.generated, 0), else_=CustomInvite.amount)).label('total_bonus'),
            func.sum(case((CustomInvite.generated, CustomInvite.amount), else_=0)).label('total_auto'),
        )

    @staticmethod
    def _to_bonus_total(row) -> BonusInviteTotal:
        return BonusInviteTotal(
            member_id=int(row.member_id),
            member_name=row.name,
            bonus=int(row.total_bonus),
            auto=int(row.total_auto),
        )

    # Leaderboard sources

    async def code_invite_totals(self, guild_id: int, channel_id: Optional[int] = None) -> List[CodeInviteTotal]:
        """Summed invite code uses per inviter."""
        query = (
            select(
                InviteCode.inviter_id,
                Member.name,
                func.sum(InviteCode.uses).label('total_uses')
            )
            .outerjoin(Member, Member.id == InviteCode.inviter_id)
            .where(InviteCode.guild_id == guild_id, InviteCode.inviter_id.isnot(None))
            .group_by(InviteCode.inviter_id, Member.name)
        )
        if channel_id is not None:
            query = query.where(InviteCode.channel_id == channel_id)

        rows = await self._fetch_all('code_invite_totals', query)
        return self._convert(
            'code_invite_totals',
            rows,
            lambda row: CodeInviteTotal(int(row.inviter_id), row.name, int(row.total_uses)),
        )

    async def bonus_invite_totals(self, guild_id: int, since: Optional[datetime] = None) -> List[BonusInviteTotal]:
        """Manual and generated custom invite sums per member, optionally only newer than `since`."""
        query = (
            select(CustomInvite.member_id, Member.name, *self._bonus_columns())
            .outerjoin(Member, Member.id == CustomInvite.member_id)
            .where(CustomInvite.guild_id == guild_id)
            .group_by(CustomInvite.member_id, Member.name)
        )
        if since is not None:
            query = query.where(CustomInvite.created_at > since)

        operation = 'bonus_invite_totals' if since is None else 'windowed_bonus_invite_totals'
        rows = await self._fetch_all(operation, query)
        return self._convert(operation, rows, self._to_bonus_total)

    async def windowed_code_invite_counts(self, guild_id: int, since: datetime) -> List[CodeInviteTotal]:
        """
        Joins newer than `since` attributed to an inviter through an exact code match.

        Not narrowed by channel: old totals always count every code of the inviter.
        """
        query = (
            select(
                InviteCode.inviter_id,
                Member.name,
                func.count(Join.id).label('total_joins')
            )
            .select_from(Join)
            .join(InviteCode, InviteCode.code == Join.exact_match_code)
            .join(Member, Member.id == InviteCode.inviter_id)
            .where(Join.guild_id == guild_id, Join.created_at > since)
            .group_by(InviteCode.inviter_id, Member.name)
        )

        rows = await self._fetch_all('windowed_code_invite_counts', query)
        return self._convert(
            'windowed_code_invite_counts',
            rows,
            lambda row: CodeInviteTotal(int(row.inviter_id), row.name, int(row.total_joins)),
        )

    async def windowed_bonus_invite_totals(self, guild_id: int, since: datetime) -> List[BonusInviteTotal]:
        return await self.bonus_invite_totals(guild_id, since=since)

    async def last_join_leave_timestamps(self, guild_id: int, member_ids: List[int]) -> List[JoinLeaveTimes]:
        """Most recent join and leave in the guild for each of `member_ids`."""
        if not member_ids:
            return []

        last_joined = (
            select(func.max(Join.created_at))
            .where(Join.member_id == Member.id, Join.guild_id == guild_id)
            .scalar_subquery()
        )
        last_left = (
            select(func.max(Leave.created_at))
            .where(Leave.member_id == Member.id, Leave.guild_id == guild_id)
            .scalar_subquery()
        )
        query = (
            select(
                Member.id,
                Member.name,
                last_joined.label('last_joined_at'),
                last_left.label('last_left_at'),
            )
            .where(Member.id.in_(member_ids))
        )

        rows = await self._fetch_all('last_join_leave_timestamps', query)
        return self._convert(
            'last_join_leave_timestamps',
            rows,
            lambda row: JoinLeaveTimes(int(row.id), row.name, row.last_joined_at, row.last_left_at),
        )

    # Member info

    async def member_invite_counts(self, guild_id: int, member_id: int) -> MemberInviteCounts:
        code = await self._fetch_scalar(
            'member_invite_counts',
            select(func.coalesce(func.sum(InviteCode.uses), 0))
            .where(InviteCode.guild_id == guild_id, InviteCode.inviter_id == member_id)
        )
        custom = await self._fetch_scalar(
            'member_invite_counts',
            select(func.coalesce(func.sum(CustomInvite.amount), 0))
            .where(CustomInvite.guild_id == guild_id, CustomInvite.member_id == member_id)
        )
        try:
            return MemberInviteCounts(code=int(code), custom=int(custom))
        except (TypeError, ValueError) as e:
            raise DataUnavailableError('member_invite_counts', f"malformed row: {e}") from e

    async def join_count(self, guild_id: int, member_id: int) -> int:
        count = await self._fetch_scalar(
            'join_count',
            select(func.count(Join.id)).where(Join.guild_id == guild_id, Join.member_id == member_id)
        )
        return int(count or 0)

    async def join_history(self, guild_id: int, member_id: int) -> List[JoinRecord]:
        """Joins of a member, newest first, with the inviter of the matched code."""
        query = (
            select(Join.created_at, InviteCode.inviter_id)
            .select_from(Join)
            .outerjoin(InviteCode, InviteCode.code == Join.exact_match_code)
            .where(Join.guild_id == guild_id, Join.member_id == member_id)
            .order_by(Join.created_at.desc())
        )
        rows = await self._fetch_all('join_history', query)
        return self._convert(
            'join_history',
            rows,
            lambda row: JoinRecord(
                joined_at=row.created_at,
                inviter_id=int(row.inviter_id) if row.inviter_id is not None else None,
            ),
        )

    async def custom_invite_history(self, guild_id: int, member_id: int) -> List[CustomInviteEntry]:
        query = (
            select(CustomInvite)
            .where(CustomInvite.guild_id == guild_id, CustomInvite.member_id == member_id)
            .order_by(CustomInvite.created_at.desc())
        )
        rows = await self._fetch_all('custom_invite_history', query)
        return self._convert(
            'custom_invite_history',
            rows,
            lambda row: CustomInviteEntry(
                amount=int(row.CustomInvite.amount),
                creator_id=row.CustomInvite.creator_id,
                reason=row.CustomInvite.reason,
                generated=bool(row.CustomInvite.generated),
                created_at=row.CustomInvite.created_at,
            ),
        )
