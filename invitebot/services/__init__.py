"""
Services package for the invite leaderboard bot.
"""

from .base import BaseService
from .invite_queries import InviteQueryService
from .leaderboard import LeaderboardService
from .member_info import MemberInfoService

__all__ = ['BaseService', 'InviteQueryService', 'LeaderboardService', 'MemberInfoService']
