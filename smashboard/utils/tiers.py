import logging
import math
from typing import List, Sequence

from smashboard.constants import TierConstants
from smashboard.data_models.leaderboard import TIER_ORDER, Tier, TierThresholds

logger = logging.getLogger(__name__)


class TierClassifier:
    """Percentile-based tier cutoffs and tier assignment"""

    @staticmethod
    def fixed_thresholds() -> TierThresholds:
        """Cutoffs used when there is no population to derive them from"""
        return TierThresholds(**TierConstants.DEFAULT_THRESHOLDS)

    @staticmethod
    def compute_thresholds(players: Sequence) -> TierThresholds:
        """
        Compute tier cutoffs from the current rated population

        Each tier starts at the ELO of the player sitting at index
        floor(p * N) of the population sorted by ELO descending, where p is
        the tier's population fraction. The top player's own ELO is the S
        cutoff, so at least one player is always tier S.

        Args:
            players: Anything exposing an ``elo`` attribute

        Returns:
            Thresholds with S >= A >= B >= C >= D
        """
        if not players:
            return TierClassifier.fixed_thresholds()

        elos: List[int] = sorted((p.elo for p in players), reverse=True)
        count = len(elos)

        cutoffs = {}
        for label, fraction in TierConstants.TIER_PERCENTILES.items():
            index = min(math.floor(fraction * count), count - 1)
            try:
                cutoffs[label] = elos[index]
            except IndexError:
                logger.warning(f"No player at index {index} for tier {label}, using default cutoff")
                cutoffs[label] = TierConstants.DEFAULT_THRESHOLDS[label]

        return TierThresholds(**cutoffs)

    @staticmethod
    def classify(elo: int, thresholds: TierThresholds) -> Tier:
        """Highest tier whose cutoff ``elo`` meets or exceeds; E otherwise"""
        for tier in TIER_ORDER[:-1]:
            if elo >= thresholds.get(tier):
                return tier
        return Tier.E

    @staticmethod
    def describe(thresholds: TierThresholds) -> List[str]:
        """Human readable ELO range per tier, best first"""
        lines = [f"{tier.value}: {thresholds.get(tier)}+" for tier in TIER_ORDER[:-1]]
        lines.append(f"{Tier.E.value}: < {thresholds.D}")
        return lines
