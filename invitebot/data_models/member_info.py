"""
Member info data models for the `info` command.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class MemberInviteCounts:
    code: int
    custom: int
    
    @property
    def total(self) -> int:
        return self.code + self.custom


@dataclass(frozen=True)
class JoinRecord:
    """One join of the member; inviter is None when no code matched exactly."""
    joined_at: datetime
    inviter_id: Optional[int]


@dataclass(frozen=True)
class CustomInviteEntry:
    amount: int
    creator_id: Optional[int]
    reason: Optional[str]
    generated: bool
    created_at: datetime


@dataclass(frozen=True)
class MemberInfo:
    member_id: int
    invites: MemberInviteCounts
    join_count: int
    joins: List[JoinRecord] = field(default_factory=list)
    custom_invites: List[CustomInviteEntry] = field(default_factory=list)
