"""
Bot-wide constants for the invite leaderboard bot.

Display symbols and defaults shared by the leaderboard renderer,
the pagination controller and the member info command.
"""

import discord


class LeaderboardConstants:
    """Constants for the invite leaderboard."""
    
    # Members shown per leaderboard page
    DEFAULT_PAGE_SIZE = 10
    
    # Trailing window used for rank changes
    DEFAULT_WINDOW_HOURS = 24
    
    # Seconds to wait for a navigation reaction
    NAVIGATION_TIMEOUT = 15
    
    # Reactions collected per navigation wait
    NAVIGATION_MAX_EVENTS = 1
    
    UP_SYMBOL = '🔺'
    DOWN_SYMBOL = '🔻'
    NEUTRAL_SYMBOL = '🔹'
    
    EMPTY_MESSAGE = 'No invites!'


class UIConstants:
    """Colors used across embeds."""
    
    LEADERBOARD_COLOR = discord.Color.gold()
    INFO_COLOR = discord.Color.blue()
