"""
Services package for the Smash leaderboard bot.

Data service access, leaderboard assembly and the background refresh loop.
"""

from .base import BaseService
from .data_client import DataServiceClient
from .leaderboard import LeaderboardView
from .refresh_scheduler import RefreshScheduler

__all__ = ['BaseService', 'DataServiceClient', 'LeaderboardView', 'RefreshScheduler']
