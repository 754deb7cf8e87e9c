"""
Member info service backing the `info` command.
"""

from invitebot.data_models.member_info import MemberInfo
from invitebot.services.base import BaseService
from invitebot.services.invite_queries import InviteQueryService


class MemberInfoService(BaseService):
    """Collects invite statistics and join history for one member."""
    
    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.queries = InviteQueryService(session_factory)
    
    async def get_member_info(self, guild_id: int, member_id: int) -> MemberInfo:
        invites = await self.queries.member_invite_counts(guild_id, member_id)
        # A member the bot saw join before tracking started still joined once
        join_count = max(await self.queries.join_count(guild_id, member_id), 1)
        joins = await self.queries.join_history(guild_id, member_id)
        custom_invites = await self.queries.custom_invite_history(guild_id, member_id)
        
        return MemberInfo(
            member_id=member_id,
            invites=invites,
            join_count=join_count,
            joins=joins,
            custom_invites=custom_invites
        )
