import discord
from discord.ext import commands
from invitebot.services.member_info import MemberInfoService
from invitebot.views.member_info import build_member_info_embed
from invitebot.utils.error_embeds import ErrorEmbeds
from invitebot.utils.leaderboard_exceptions import DataUnavailableError, MemberNotInGuildError
from invitebot.utils.logger import setup_logger

logger = setup_logger(__name__)

class MemberInfoCog(commands.Cog):
    """Moderator commands for inspecting a member's invites"""
    
    def __init__(self, bot):
        self.bot = bot
        self.member_info_service = MemberInfoService(bot.db.session_factory)
    
    @commands.command(name='info', aliases=['showinfo'], usage='@user')
    @commands.guild_only()
    @commands.check_any(
        commands.has_permissions(administrator=True),
        commands.has_permissions(manage_channels=True),
        commands.has_permissions(manage_roles=True)
    )
    @commands.bot_has_guild_permissions(manage_guild=True)
    async def info(self, ctx: commands.Context, user: discord.User):
        """Show info about a specific member"""
        logger.info(f"{ctx.guild.name} ({ctx.author.name}): {ctx.message.content}")
        
        try:
            member = ctx.guild.get_member(user.id)
            if member is None:
                raise MemberNotInGuildError(user.id)
            info = await self.member_info_service.get_member_info(ctx.guild.id, member.id)
        except MemberNotInGuildError as e:
            await ctx.send(e.user_message)
            return
        except DataUnavailableError as e:
            logger.error(f"Member info failed for {user.id} in guild {ctx.guild.id}: {e}")
            await ctx.send(embed=ErrorEmbeds.data_unavailable(e.user_message))
            return
        
        await ctx.send(embed=build_member_info_embed(member, info))

async def setup(bot):
    await bot.add_cog(MemberInfoCog(bot))
