"""
Leaderboard view for the tier classification engine.

Combines derived player stats with tier classification into ordered
rankings and tier buckets, and orders match participants for the match
history. All of it is rebuilt from scratch for every snapshot.
"""

from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from smashboard.data_models.leaderboard import (
    TIER_ORDER, LeaderboardSnapshot, Tier, TierThresholds
)
from smashboard.data_models.match import Match
from smashboard.data_models.player import DerivedPlayer, Player
from smashboard.utils.stats import StatsRollup
from smashboard.utils.tiers import TierClassifier
from smashboard.utils.logger import setup_logger

logger = setup_logger(__name__)


class LeaderboardView:
    """Ranking, tier bucketing and snapshot assembly."""

    @staticmethod
    def rank(players: Iterable[DerivedPlayer]) -> Tuple[DerivedPlayer, ...]:
        """Stable sort by ELO descending; rank is the 1-based position."""
        return tuple(sorted(players, key=lambda p: p.elo, reverse=True))

    @staticmethod
    def bucket_by_tier(
        ranked: Sequence[DerivedPlayer],
        thresholds: TierThresholds
    ) -> Dict[Tier, Tuple[DerivedPlayer, ...]]:
        """
        Partition the ranked players by tier in a single pass.

        Every tier is present in the result, possibly empty, and each bucket
        keeps the ranked order.
        """
        buckets: Dict[Tier, List[DerivedPlayer]] = {tier: [] for tier in TIER_ORDER}
        for player in ranked:
            buckets[TierClassifier.classify(player.elo, thresholds)].append(player)
        return {tier: tuple(members) for tier, members in buckets.items()}

    @staticmethod
    def order_participants(match: Match) -> Match:
        """Winners first; relative order is otherwise preserved."""
        winners = [p for p in match.participants if p.has_won]
        others = [p for p in match.participants if not p.has_won]
        return match.with_participants(winners + others)

    @staticmethod
    def paginate(
        ranked: Sequence[DerivedPlayer],
        page: int = 1,
        page_size: int = 10
    ) -> Tuple[List[Tuple[int, DerivedPlayer]], int]:
        """Slice the ranking into a page of (rank, player) pairs plus the page count."""
        if not isinstance(page, int) or page < 1:
            raise ValueError("page must be a positive integer")
        if not isinstance(page_size, int) or page_size < 1:
            raise ValueError("page_size must be a positive integer")

        total = len(ranked)
        total_pages = (total + page_size - 1) // page_size if total > 0 else 1
        start_idx = (page - 1) * page_size
        entries = [
            (rank, player)
            for rank, player in enumerate(ranked[start_idx:start_idx + page_size], start=start_idx + 1)
        ]
        return entries, total_pages

    @staticmethod
    def build_snapshot(
        players: Sequence[Player],
        matches: Sequence[Match] = (),
        now: Optional[datetime] = None
    ) -> LeaderboardSnapshot:
        """
        Recompute everything the leaderboard shows from one player list.

        Derived stats, thresholds, ranks and buckets all come from the same
        ``players`` sequence in one synchronous call, so the result never
        mixes data from two fetches.

        Args:
            players: Player rows from the data service
            matches: Match rows, newest first; used for participant totals
                and the match history
            now: Timestamp recorded on the snapshot (defaults to UTC now)

        Returns:
            Immutable leaderboard snapshot
        """
        participant_totals = StatsRollup.rollup_participants(matches)
        derived = [
            StatsRollup.attach_derived(player, participant_totals.get(player.id))
            for player in players
        ]

        thresholds = TierClassifier.compute_thresholds(derived)
        ranked = LeaderboardView.rank(derived)
        buckets = LeaderboardView.bucket_by_tier(ranked, thresholds)
        tiers = {
            player.id: tier
            for tier, members in buckets.items()
            for player in members
        }

        ordered_matches = []
        for match in matches:
            if len(match.winners) > 1:
                # Trusted as-is; game mode rules are not enforced here
                logger.debug(f"Match {match.id} has {len(match.winners)} winners")
            ordered_matches.append(LeaderboardView.order_participants(match))

        logger.debug(
            f"Built snapshot: {len(ranked)} players, {len(ordered_matches)} matches, "
            f"thresholds={thresholds.as_dict()}"
        )

        return LeaderboardSnapshot(
            ranked=ranked,
            thresholds=thresholds,
            buckets=buckets,
            tiers=tiers,
            matches=tuple(ordered_matches),
            generated_at=now or datetime.now(timezone.utc),
        )
