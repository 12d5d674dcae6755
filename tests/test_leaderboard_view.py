"""Tests for smashboard.services.leaderboard module."""

import random
from datetime import datetime, timezone

import pytest

from conftest import make_match, make_participant, make_player
from smashboard.data_models.leaderboard import TIER_ORDER, Tier
from smashboard.services.leaderboard import LeaderboardView
from smashboard.utils.stats import StatsRollup
from smashboard.utils.tiers import TierClassifier


def _derived(players):
    return [StatsRollup.attach_derived(p) for p in players]


class TestRank:
    """Ordering of the rankings table."""

    def test_sorted_by_elo_descending(self, ten_players):
        shuffled = list(ten_players)
        random.Random(5).shuffle(shuffled)
        ranked = LeaderboardView.rank(_derived(shuffled))
        elos = [p.elo for p in ranked]
        assert elos == sorted(elos, reverse=True)

    def test_ties_keep_input_order(self):
        players = _derived([make_player(1, 1500), make_player(2, 1600), make_player(3, 1500), make_player(4, 1500)])
        ranked = LeaderboardView.rank(players)
        assert [p.id for p in ranked] == [2, 1, 3, 4]

    def test_empty(self):
        assert LeaderboardView.rank([]) == ()


class TestBucketByTier:
    """Tier buckets built from the ranked list."""

    def test_partition_is_exhaustive_and_disjoint(self):
        rng = random.Random(9)
        players = _derived([make_player(i, rng.randint(0, 2500)) for i in range(57)])
        ranked = LeaderboardView.rank(players)
        thresholds = TierClassifier.compute_thresholds(ranked)
        buckets = LeaderboardView.bucket_by_tier(ranked, thresholds)

        assert list(buckets) == list(TIER_ORDER)
        flattened = [p for tier in TIER_ORDER for p in buckets[tier]]
        assert sorted(p.id for p in flattened) == sorted(p.id for p in ranked)
        assert len(flattened) == len(set(p.id for p in flattened))
        # Concatenating S..E reproduces the ranking
        assert [p.id for p in flattened] == [p.id for p in ranked]

    def test_buckets_keep_rating_order(self, ten_players):
        ranked = LeaderboardView.rank(_derived(ten_players))
        thresholds = TierClassifier.compute_thresholds(ranked)
        buckets = LeaderboardView.bucket_by_tier(ranked, thresholds)
        assert [p.elo for p in buckets[Tier.B]] == [1500, 1300]
        assert [p.elo for p in buckets[Tier.E]] == [300, 100]
        for members in buckets.values():
            assert [p.elo for p in members] == sorted((p.elo for p in members), reverse=True)

    def test_empty_tiers_are_present(self):
        ranked = LeaderboardView.rank(_derived([make_player(1, 1000)]))
        buckets = LeaderboardView.bucket_by_tier(ranked, TierClassifier.compute_thresholds(ranked))
        assert [p.id for p in buckets[Tier.S]] == [1]
        assert all(buckets[t] == () for t in TIER_ORDER[1:])


class TestOrderParticipants:
    """Winners-first ordering of a match."""

    def test_winner_moves_to_front_others_stable(self):
        match = make_match(1, [
            make_participant(1, player=1, has_won=False),
            make_participant(2, player=2, has_won=True),
            make_participant(3, player=3, has_won=False),
        ])
        ordered = LeaderboardView.order_participants(match)
        assert [p.id for p in ordered.participants] == [2, 1, 3]
        # Source match is untouched
        assert [p.id for p in match.participants] == [1, 2, 3]

    def test_multiple_winners_are_kept_in_order(self):
        match = make_match(1, [
            make_participant(1, has_won=False),
            make_participant(2, has_won=True),
            make_participant(3, has_won=False),
            make_participant(4, has_won=True),
        ])
        ordered = LeaderboardView.order_participants(match)
        assert [p.id for p in ordered.participants] == [2, 4, 1, 3]


class TestPaginate:

    def test_pages(self, ten_players):
        ranked = LeaderboardView.rank(_derived(ten_players))
        entries, total_pages = LeaderboardView.paginate(ranked, page=2, page_size=4)
        assert total_pages == 3
        assert [rank for rank, _ in entries] == [5, 6, 7, 8]
        assert entries[0][1].elo == 1100

    def test_empty_ranking_has_one_page(self):
        assert LeaderboardView.paginate((), 1, 10) == ([], 1)

    def test_invalid_page(self):
        with pytest.raises(ValueError):
            LeaderboardView.paginate((), 0, 10)


class TestBuildSnapshot:
    """One-shot recompute of the whole leaderboard."""

    def test_snapshot_is_consistent(self, ten_players):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        snapshot = LeaderboardView.build_snapshot(list(reversed(ten_players)), now=now)

        assert snapshot.generated_at == now
        assert [p.elo for p in snapshot.ranked][:3] == [2000, 1700, 1500]
        assert snapshot.thresholds.as_dict() == {"S": 2000, "A": 1700, "B": 1300, "C": 900, "D": 500}
        assert snapshot.rank_of(1) == 1
        assert snapshot.rank_of(10) == 10
        assert snapshot.rank_of(999) is None
        assert snapshot.tier_of(1) == Tier.S
        assert snapshot.tier_of(6) == Tier.C
        for player in snapshot.ranked:
            assert snapshot.tier_of(player.id) == TierClassifier.classify(player.elo, snapshot.thresholds)

    def test_matches_are_ordered_and_feed_stats(self):
        players = [make_player(1, 1400), make_player(2, 1300)]
        matches = [make_match(7, [
            make_participant(1, player=1, has_won=False, total_kos=1, total_falls=2),
            make_participant(2, player=2, has_won=True, total_kos=2, total_falls=1),
        ])]
        snapshot = LeaderboardView.build_snapshot(players, matches)

        assert [p.id for p in snapshot.matches[0].participants] == [2, 1]
        by_id = {p.id: p for p in snapshot.ranked}
        assert (by_id[2].total_wins, by_id[2].total_losses) == (1, 0)
        assert (by_id[1].total_wins, by_id[1].total_losses) == (0, 1)

    def test_empty_population_uses_default_thresholds(self):
        snapshot = LeaderboardView.build_snapshot([])
        assert snapshot.ranked == ()
        assert snapshot.thresholds == TierClassifier.fixed_thresholds()
        assert snapshot.total_players == 0
