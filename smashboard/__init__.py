"""
Smashboard - live Smash tournament leaderboard.

Tier classification, stats roll-up and periodic refresh of player
ratings served by an external data service.
"""

__version__ = "1.0.0"
