import os
from dotenv import load_dotenv

from invitebot.constants import LeaderboardConstants

load_dotenv()

class Config:
    """Bot configuration settings"""
    
    # Discord settings
    DISCORD_TOKEN = os.getenv('DISCORD_TOKEN')
    COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', '!')
    
    # Database settings
    DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///invites.db')
    
    DEBUG = os.getenv('DEBUG', 'False').lower() == 'true'
    LOG_DIR = os.getenv('LOG_DIR', 'logs')
    
    # Leaderboard settings
    LEADERBOARD_WINDOW_HOURS = int(os.getenv('LEADERBOARD_WINDOW_HOURS', LeaderboardConstants.DEFAULT_WINDOW_HOURS))
    LEADERBOARD_PAGE_SIZE = int(os.getenv('LEADERBOARD_PAGE_SIZE', LeaderboardConstants.DEFAULT_PAGE_SIZE))
    LEADERBOARD_NAVIGATION_TIMEOUT = float(os.getenv('LEADERBOARD_NAVIGATION_TIMEOUT', LeaderboardConstants.NAVIGATION_TIMEOUT))
    
    @classmethod
    def get_database_url(cls) -> str:
        """Database URL with the async sqlite driver applied"""
        database_url = cls.DATABASE_URL
        if database_url.startswith('sqlite:///'):
            database_url = database_url.replace('sqlite:///', 'sqlite+aiosqlite:///')
        return database_url
    
    @classmethod
    def validate(cls):
        """Validate that required configuration is present"""
        if not cls.DISCORD_TOKEN:
            raise ValueError("DISCORD_TOKEN is required")
        if cls.LEADERBOARD_WINDOW_HOURS <= 0:
            raise ValueError("LEADERBOARD_WINDOW_HOURS must be positive")
        if cls.LEADERBOARD_PAGE_SIZE <= 0:
            raise ValueError("LEADERBOARD_PAGE_SIZE must be positive")
        if cls.LEADERBOARD_NAVIGATION_TIMEOUT <= 0:
            raise ValueError("LEADERBOARD_NAVIGATION_TIMEOUT must be positive")
