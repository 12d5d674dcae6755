"""
Bot-wide constants for the Smash leaderboard bot.

Tier cutoffs, refresh cadence defaults and UI values used throughout
the codebase live here instead of as magic numbers.
"""

class TierConstants:
    """Constants related to tier classification."""

    # Ordered best to worst; E is the catch-all below D
    TIER_LABELS = ("S", "A", "B", "C", "D", "E")

    # Used when there are no rated players to derive cutoffs from
    DEFAULT_THRESHOLDS = {
        "S": 2000,
        "A": 1800,
        "B": 1600,
        "C": 1400,
        "D": 1200,
    }

    # Population fraction at which each tier starts (index = floor(p * N))
    TIER_PERCENTILES = {
        "S": 0.0,
        "A": 0.15,
        "B": 0.30,
        "C": 0.50,
        "D": 0.75,
    }

class RefreshConstants:
    """Constants for the background refresh loop."""

    DEFAULT_REFRESH_INTERVAL = 30  # seconds between fetches
    COUNTDOWN_TICK = 1  # seconds per countdown step

    PLAYERS_ERROR_MESSAGE = "Failed to load players. Please try again later."

class UIConstants:
    """Constants for Discord UI elements."""

    # Embed colors
    DEFAULT_EMBED_COLOR = 0x3498db  # Blue
    GOLD_RANK_COLOR = 0xffd700     # Gold for #1 ranked players
    ERROR_COLOR = 0xe74c3c         # Red for errors
    HEADER_COLOR = 0xdc2626        # Smash red

    # Tier badge colors
    TIER_COLORS = {
        "S": 0xeab308,  # yellow
        "A": 0xef4444,  # red
        "B": 0x3b82f6,  # blue
        "C": 0x22c55e,  # green
        "D": 0xa855f7,  # purple
        "E": 0x6b7280,  # gray
    }

    TROPHY_EMOJI = "🏆"
    REFRESH_EMOJI = "🔄"
    CPU_EMOJI = "🤖"

    # Rows shown per embed before truncation
    MAX_RANKING_ROWS = 25
    MAX_MATCHES_SHOWN = 5
