"""Tests for smashboard.services.refresh_scheduler module."""

import asyncio

import pytest

from conftest import FakeDataClient, make_match, make_participant, make_player
from smashboard.constants import RefreshConstants
from smashboard.data_models.leaderboard import RefreshState
from smashboard.services.refresh_scheduler import RefreshScheduler
from smashboard.utils.exceptions import FetchFailure


def _players(*elos):
    return [make_player(i + 1, elo) for i, elo in enumerate(elos)]


class TestRunCycle:
    """A single fetch-and-recompute cycle."""

    def test_initial_load(self):
        client = FakeDataClient(players=_players(1200, 1800))
        scheduler = RefreshScheduler(client, interval=30, tick=1)
        assert scheduler.state is RefreshState.IDLE

        asyncio.run(scheduler.run_cycle(background=False))

        assert scheduler.state is RefreshState.READY
        assert [p.elo for p in scheduler.snapshot.ranked] == [1800, 1200]
        assert scheduler.error is None
        assert scheduler.last_updated is not None
        assert scheduler.countdown == 30

    def test_failed_refresh_keeps_previous_ranking(self):
        client = FakeDataClient(players=_players(1500, 1000))
        scheduler = RefreshScheduler(client, interval=30, tick=1)

        async def scenario():
            await scheduler.run_cycle(background=False)
            good = scheduler.snapshot
            good_updated = scheduler.last_updated

            client.players = FetchFailure("/players", "boom", status=500)
            await scheduler.refresh()
            assert scheduler.snapshot is good
            assert scheduler.last_updated == good_updated
            assert scheduler.error == RefreshConstants.PLAYERS_ERROR_MESSAGE
            assert scheduler.status.error is not None

            client.players = _players(900, 2100, 1400)
            await scheduler.refresh()
            assert scheduler.error is None
            assert scheduler.snapshot is not good
            assert [p.elo for p in scheduler.snapshot.ranked] == [2100, 1400, 900]

        asyncio.run(scenario())

    def test_failed_refresh_does_not_reset_countdown(self):
        client = FakeDataClient(players=FetchFailure("/players", "down"))
        scheduler = RefreshScheduler(client, interval=30, tick=1)
        scheduler.countdown = 12
        asyncio.run(scheduler.refresh())
        assert scheduler.countdown == 12
        assert scheduler.snapshot is None
        assert scheduler.state is RefreshState.READY

    def test_successful_refresh_resets_countdown(self):
        client = FakeDataClient(players=_players(1000))
        scheduler = RefreshScheduler(client, interval=30, tick=1)
        scheduler.countdown = 4
        asyncio.run(scheduler.refresh())
        assert scheduler.countdown == 30

    def test_match_failure_is_not_user_visible(self):
        match = make_match(1, [make_participant(1, player=1, has_won=True)])
        client = FakeDataClient(players=_players(1000, 1100), matches=[match])
        scheduler = RefreshScheduler(client, interval=30, tick=1)

        async def scenario():
            await scheduler.run_cycle(background=False)
            client.matches = FetchFailure("/matches", "timeout")
            client.players = _players(1000, 1100, 1200)
            await scheduler.refresh()

        asyncio.run(scenario())
        assert scheduler.error is None
        assert scheduler.snapshot.total_players == 3
        # Last good match list is reused
        assert [m.id for m in scheduler.snapshot.matches] == [1]

    def test_dismiss_error(self):
        client = FakeDataClient(players=FetchFailure("/players", "down"))
        scheduler = RefreshScheduler(client, interval=30, tick=1)
        asyncio.run(scheduler.refresh())
        assert scheduler.error
        scheduler.dismiss_error()
        assert scheduler.error is None

    def test_overlapping_cycles_last_arrival_wins(self):
        slow = _players(1111)
        fast = _players(2222)

        class StaggeredClient(FakeDataClient):
            def __init__(self):
                super().__init__()
                self.responses = [(0.05, slow), (0.0, fast)]

            async def fetch_players(self):
                delay, players = self.responses.pop(0)
                await asyncio.sleep(delay)
                return players

        scheduler = RefreshScheduler(StaggeredClient(), interval=30, tick=1)

        async def scenario():
            await asyncio.gather(scheduler.refresh(), scheduler.refresh())

        asyncio.run(scenario())
        assert [p.elo for p in scheduler.snapshot.ranked] == [1111]
        assert scheduler.state is RefreshState.READY

    def test_listeners_are_notified_and_isolated(self):
        client = FakeDataClient(players=_players(1000))
        scheduler = RefreshScheduler(client, interval=30, tick=1)
        seen = []

        async def broken(_):
            raise RuntimeError("listener bug")

        async def recorder(s):
            seen.append(s.snapshot.total_players)

        scheduler.add_listener(broken)
        scheduler.add_listener(recorder)
        asyncio.run(scheduler.refresh())
        assert seen == [1]

        scheduler.remove_listener(recorder)
        asyncio.run(scheduler.refresh())
        assert seen == [1]

    def test_invalid_interval(self):
        with pytest.raises(ValueError):
            RefreshScheduler(FakeDataClient(), interval=0)


class TestCountdown:

    def test_counts_down_and_wraps(self):
        scheduler = RefreshScheduler(FakeDataClient(), interval=3, tick=1)
        assert scheduler.countdown == 3
        values = []
        for _ in range(4):
            scheduler.advance_countdown()
            values.append(scheduler.countdown)
        assert values == [2, 1, 3, 2]


class TestLifecycle:
    """Timers started together and torn down together."""

    def test_start_fetches_immediately_and_repeats(self):
        client = FakeDataClient(players=_players(1000, 1500))
        scheduler = RefreshScheduler(client, interval=0.05, tick=0.01)

        async def scenario():
            scheduler.start()
            scheduler.start()  # idempotent
            await asyncio.sleep(0.2)
            assert client.player_calls >= 2
            assert scheduler.snapshot is not None
            scheduler.stop()
            scheduler.stop()  # idempotent
            await asyncio.sleep(0.05)
            calls = client.player_calls
            await asyncio.sleep(0.15)
            assert client.player_calls == calls
            assert not scheduler._fetch_loop.is_running()
            assert not scheduler._countdown_loop.is_running()

        asyncio.run(scenario())
        assert scheduler.state is RefreshState.STOPPED
        assert not scheduler.is_running

    def test_first_fetch_is_loading_then_ready(self):
        client = FakeDataClient(players=_players(1000))
        scheduler = RefreshScheduler(client, interval=30, tick=1)

        async def scenario():
            client.player_gate = asyncio.Event()
            scheduler.start()
            await asyncio.sleep(0.02)
            assert scheduler.status.loading
            client.player_gate.set()
            await asyncio.sleep(0.02)
            assert scheduler.state is RefreshState.READY
            assert not scheduler.status.refreshing
            scheduler.stop()
            await asyncio.sleep(0.01)

        asyncio.run(scenario())

    def test_stop_abandons_fetch_in_flight(self):
        client = FakeDataClient(players=_players(1000))
        client.player_gate = asyncio.Event()
        scheduler = RefreshScheduler(client, interval=30, tick=1)

        async def scenario():
            scheduler.start()
            await asyncio.sleep(0.05)
            assert scheduler.state is RefreshState.LOADING
            scheduler.stop()
            await asyncio.sleep(0.05)
            client.player_gate.set()
            await asyncio.sleep(0.05)

        asyncio.run(scenario())
        assert scheduler.snapshot is None
        assert scheduler.state is RefreshState.STOPPED

    def test_stop_before_start_is_harmless(self):
        scheduler = RefreshScheduler(FakeDataClient(), interval=30, tick=1)
        scheduler.stop()
        assert scheduler.state is RefreshState.IDLE

    def test_restart_after_stop(self):
        client = FakeDataClient(players=_players(1000))
        scheduler = RefreshScheduler(client, interval=0.05, tick=0.01)

        async def scenario():
            scheduler.start()
            await asyncio.sleep(0.02)
            scheduler.stop()
            scheduler.start()
            await asyncio.sleep(0.1)
            assert scheduler.is_running
            assert scheduler._fetch_loop.is_running()
            scheduler.stop()
            await asyncio.sleep(0.02)

        asyncio.run(scenario())
        assert client.player_calls >= 2
