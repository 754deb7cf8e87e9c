import discord
from discord.ext import commands
from typing import Optional
from invitebot.config import Config
from invitebot.services.leaderboard import LeaderboardService
from invitebot.views.leaderboard import LeaderboardPaginator
from invitebot.utils.error_embeds import ErrorEmbeds
from invitebot.utils.leaderboard_exceptions import LeaderboardException
from invitebot.utils.logger import setup_logger

logger = setup_logger(__name__)

class LeaderboardCog(commands.Cog):
    """Invite leaderboard commands"""
    
    def __init__(self, bot):
        self.bot = bot
        self.leaderboard_service = LeaderboardService(bot.db.session_factory)
    
    @commands.command(name='leaderboard', aliases=['top'], usage='(page) (#channel)')
    @commands.guild_only()
    @commands.bot_has_guild_permissions(manage_guild=True)
    async def leaderboard(
        self,
        ctx: commands.Context,
        page: Optional[int] = None,
        channel: Optional[discord.TextChannel] = None
    ):
        """Show members with most invites.
        
        page      Which page of the leaderboard to get.
        #channel  Will count only invites for this channel.
        """
        logger.info(f"{ctx.guild.name} ({ctx.author.name}): {ctx.message.content}")
        
        try:
            snapshot = await self.leaderboard_service.get_snapshot(
                guild_id=ctx.guild.id,
                channel_id=channel.id if channel else None
            )
        except LeaderboardException as e:
            logger.error(f"Leaderboard failed for guild {ctx.guild.id}: {e}")
            await ctx.send(embed=ErrorEmbeds.data_unavailable(e.user_message))
            return
        
        paginator = LeaderboardPaginator(
            self.bot,
            snapshot,
            ctx.message,
            page=page - 1 if page else 0,
            timeout=Config.LEADERBOARD_NAVIGATION_TIMEOUT
        )
        await paginator.run()

async def setup(bot):
    await bot.add_cog(LeaderboardCog(bot))
