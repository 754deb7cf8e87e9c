"""
Invite leaderboard service.

Builds a point-in-time LeaderboardSnapshot for a guild: runs the aggregate
invite queries, merges them, computes the current and window-start rankings
and resolves which ranked members are still in the guild.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from invitebot.config import Config
from invitebot.data_models.leaderboard import LeaderboardSnapshot
from invitebot.services.base import BaseService
from invitebot.services.invite_queries import InviteQueryService
from invitebot.utils.ranking import (
    build_presence_map, merge_invite_sources, rank_at_window_start, rank_current
)

logger = logging.getLogger(__name__)


class LeaderboardService(BaseService):
    """Service assembling invite leaderboards from the invite tracker tables."""
    
    def __init__(self, session_factory, window_hours: Optional[int] = None, page_size: Optional[int] = None):
        super().__init__(session_factory)
        self.queries = InviteQueryService(session_factory)
        self.window_hours = window_hours or Config.LEADERBOARD_WINDOW_HOURS
        self.page_size = page_size or Config.LEADERBOARD_PAGE_SIZE
    
    def window_start(self, now: Optional[datetime] = None) -> datetime:
        # Stored timestamps are naive UTC
        now = now or datetime.now(timezone.utc).replace(tzinfo=None)
        return now - timedelta(hours=self.window_hours)
    
    async def get_snapshot(
        self,
        guild_id: int,
        channel_id: Optional[int] = None,
        now: Optional[datetime] = None
    ) -> LeaderboardSnapshot:
        """Fetch, merge and rank the invites of a guild."""
        since = self.window_start(now)
        
        code_totals = await self.queries.code_invite_totals(guild_id, channel_id)
        bonus_totals = await self.queries.bonus_invite_totals(guild_id)
        windowed_code_counts = await self.queries.windowed_code_invite_counts(guild_id, since)
        windowed_bonus_totals = await self.queries.windowed_bonus_invite_totals(guild_id, since)
        
        records = merge_invite_sources(code_totals, bonus_totals, windowed_code_counts, windowed_bonus_totals)
        ranking = rank_current(records)
        window_ranking = rank_at_window_start(records, ranking)
        
        presence = {}
        if ranking:
            join_leave_rows = await self.queries.last_join_leave_timestamps(guild_id, ranking)
            presence = build_presence_map(join_leave_rows)
        
        logger.debug(
            f"Leaderboard for guild {guild_id}: {len(records)} records, {len(ranking)} ranked"
        )
        
        return LeaderboardSnapshot(
            records=records,
            ranking=ranking,
            window_ranking=window_ranking,
            presence=presence,
            channel_id=channel_id,
            page_size=self.page_size,
            window_hours=self.window_hours
        )
