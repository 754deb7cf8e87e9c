"""
Centralized error embeds for consistent error handling across the invite bot.
"""

import discord


class ErrorEmbeds:
    """Centralized error embed factory for consistent error handling."""
    
    @staticmethod
    def invalid_input(message: str) -> discord.Embed:
        """Create embed for invalid user input."""
        return discord.Embed(
            title="Invalid Input",
            description=message,
            color=discord.Color.red()
        )
    
    @staticmethod
    def data_unavailable(message: str) -> discord.Embed:
        """Create embed for failed invite queries."""
        return discord.Embed(
            title="Invite Data Unavailable",
            description=message,
            color=discord.Color.red()
        )
    
    @staticmethod
    def permission_denied() -> discord.Embed:
        """Create embed for permission errors."""
        return discord.Embed(
            title="Permission Denied",
            description="You don't have permission to perform this action.",
            color=discord.Color.red()
        )
    
    @staticmethod
    def guild_only() -> discord.Embed:
        """Create embed for commands used outside a server."""
        return discord.Embed(
            title="Server Only",
            description="This command can only be used in a server!",
            color=discord.Color.red()
        )
