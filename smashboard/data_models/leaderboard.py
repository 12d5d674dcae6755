"""
Leaderboard data models for the tier classification engine.

Provides immutable data transfer objects for tier thresholds, computed
leaderboard snapshots and the refresh status shown next to them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from smashboard.data_models.match import Match
from smashboard.data_models.player import DerivedPlayer


class Tier(str, Enum):
    """Discrete skill bracket, S best through E worst."""
    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"
    E = "E"


# Highest first; classification walks this order
TIER_ORDER: Tuple[Tier, ...] = (Tier.S, Tier.A, Tier.B, Tier.C, Tier.D, Tier.E)


@dataclass(frozen=True)
class TierThresholds:
    """Minimum-inclusive ELO cutoff for each tier above E."""
    S: int
    A: int
    B: int
    C: int
    D: int

    def get(self, tier: Tier) -> Optional[int]:
        """Cutoff for ``tier``; E has no cutoff and returns None."""
        if tier is Tier.E:
            return None
        return getattr(self, tier.value)

    def as_dict(self) -> Dict[str, int]:
        return {"S": self.S, "A": self.A, "B": self.B, "C": self.C, "D": self.D}


@dataclass(frozen=True)
class LeaderboardSnapshot:
    """One atomic recompute of rankings, tiers and match history."""
    ranked: Tuple[DerivedPlayer, ...]
    thresholds: TierThresholds
    buckets: Dict[Tier, Tuple[DerivedPlayer, ...]]
    tiers: Dict[int, Tier]  # player_id -> tier
    matches: Tuple[Match, ...] = ()
    generated_at: Optional[datetime] = None

    def rank_of(self, player_id: int) -> Optional[int]:
        """1-based position in the ranking, or None when absent."""
        for index, player in enumerate(self.ranked):
            if player.id == player_id:
                return index + 1
        return None

    def tier_of(self, player_id: int) -> Optional[Tier]:
        return self.tiers.get(player_id)

    @property
    def total_players(self) -> int:
        return len(self.ranked)


class RefreshState(str, Enum):
    """Lifecycle of the refresh scheduler."""
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    REFRESHING = "refreshing"
    STOPPED = "stopped"


@dataclass(frozen=True)
class RefreshStatus:
    """What the presentation layer needs to render the refresh indicator."""
    state: RefreshState
    countdown: int
    error: Optional[str] = None
    last_updated: Optional[datetime] = None

    @property
    def loading(self) -> bool:
        return self.state is RefreshState.LOADING

    @property
    def refreshing(self) -> bool:
        return self.state is RefreshState.REFRESHING
