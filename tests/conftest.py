"""Shared test fixtures and builders."""

import asyncio
from typing import List, Optional

import pytest

from smashboard.data_models.match import Match, MatchParticipant
from smashboard.data_models.player import Player


def make_player(id: int, elo: int, **kwargs) -> Player:
    """Create a Player with defaults for easy test construction."""
    defaults = dict(name=f"player{id}")
    defaults.update(kwargs)
    return Player(id=id, elo=elo, **defaults)


def make_participant(id: int, player: Optional[int] = None, has_won: bool = False, **kwargs) -> MatchParticipant:
    defaults = dict(
        player_name=f"player{player}" if player is not None else "",
        player_display_name=None,
        smash_character="Fox",
        is_cpu=False,
        total_kos=0,
        total_falls=0,
        total_sds=0,
    )
    defaults.update(kwargs)
    return MatchParticipant(id=id, player=player, has_won=has_won, **defaults)


def make_match(id: int, participants: List[MatchParticipant]) -> Match:
    return Match(id=id, created_at=None, participants=tuple(participants))


class FakeDataClient:
    """Stands in for DataServiceClient; results may be lists or exceptions."""

    def __init__(self, players=None, matches=None):
        self.players = players if players is not None else []
        self.matches = matches if matches is not None else []
        self.player_calls = 0
        self.match_calls = 0
        self.closed = False
        self.player_gate: Optional[asyncio.Event] = None

    async def fetch_players(self):
        self.player_calls += 1
        if self.player_gate is not None:
            await self.player_gate.wait()
        if isinstance(self.players, Exception):
            raise self.players
        return list(self.players)

    async def fetch_matches(self):
        self.match_calls += 1
        if isinstance(self.matches, Exception):
            raise self.matches
        return list(self.matches)

    async def close(self):
        self.closed = True


@pytest.fixture
def ten_players():
    """Ten-player population used for the tier cutoff worked example."""
    elos = [2000, 1700, 1500, 1300, 1100, 900, 700, 500, 300, 100]
    return [make_player(i + 1, elo) for i, elo in enumerate(elos)]
