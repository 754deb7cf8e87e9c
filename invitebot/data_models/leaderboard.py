"""
Invite leaderboard data models.

Immutable data transfer objects passed from the query layer through the
merge and ranking functions to the page renderer, plus the mutable state
owned by one pagination session.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

import discord


@dataclass(frozen=True)
class CodeInviteTotal:
    """Code-invite row: summed uses, or windowed join count, per inviter."""
    member_id: int
    member_name: Optional[str]
    total: int


@dataclass(frozen=True)
class BonusInviteTotal:
    """Custom-invite row split into manual bonus and generated (auto) parts."""
    member_id: int
    member_name: Optional[str]
    bonus: int
    auto: int


@dataclass(frozen=True)
class JoinLeaveTimes:
    member_id: int
    member_name: Optional[str]
    last_joined_at: Optional[datetime]
    last_left_at: Optional[datetime]


@dataclass(frozen=True)
class MemberInviteRecord:
    """Composite invite counts for one member."""
    display_name: Optional[str]
    total: int = 0
    bonus: int = 0
    old_total: int = 0
    old_bonus: int = 0


@dataclass(frozen=True)
class LeaderboardSnapshot:
    """Point-in-time leaderboard data for one invocation."""
    records: Dict[int, MemberInviteRecord]
    ranking: List[int]
    window_ranking: List[int]
    presence: Dict[int, bool]
    channel_id: Optional[int] = None
    page_size: int = 10
    window_hours: int = 24
    
    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.ranking) / self.page_size)
    
    @property
    def is_empty(self) -> bool:
        return not self.ranking
    
    def clamp_page(self, page: int) -> int:
        """Clamp a 0-based page index into the valid range."""
        return max(min(page, self.total_pages - 1), 0)


@dataclass(frozen=True)
class LeaderboardPageText:
    """Rendered page, independent of the transport."""
    title: str
    description: str


@dataclass
class PaginationState:
    """Mutable state of one interactive leaderboard session."""
    snapshot: LeaderboardSnapshot
    page: int
    message: discord.Message
    
    @property
    def total_pages(self) -> int:
        return self.snapshot.total_pages
    
    @property
    def can_go_up(self) -> bool:
        return self.page > 0
    
    @property
    def can_go_down(self) -> bool:
        return self.page < self.total_pages - 1


@dataclass(frozen=True)
class NavigationVotes:
    """Navigation reactions collected during one wait."""
    ups: int = 0
    downs: int = 0
