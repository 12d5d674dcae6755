"""
Client for the leaderboard data service.

Fetches the ``/players`` and ``/matches`` JSON contracts and turns them into
immutable records. Malformed rows are skipped with a warning; transport
problems and non-200 answers raise FetchFailure.
"""

from typing import Any, Callable, List, TypeVar

from smashboard.data_models.match import Match
from smashboard.data_models.player import Player
from smashboard.services.base import BaseService
from smashboard.utils.exceptions import FetchFailure, ShapeMismatch
from smashboard.utils.logger import setup_logger

logger = setup_logger(__name__)

T = TypeVar("T")

PLAYERS_ENDPOINT = "/players"
MATCHES_ENDPOINT = "/matches"


class DataServiceClient(BaseService):
    """Reads players and matches from the data service."""

    async def fetch_players(self) -> List[Player]:
        """Fetch every player row."""
        payload = await self.get_json(PLAYERS_ENDPOINT)
        players = self._parse_rows(PLAYERS_ENDPOINT, payload, Player.from_dict)
        logger.debug(f"Fetched {len(players)} players")
        return players

    async def fetch_matches(self) -> List[Match]:
        """Fetch every match, newest first as ordered by the data service."""
        payload = await self.get_json(MATCHES_ENDPOINT)
        matches = self._parse_rows(MATCHES_ENDPOINT, payload, Match.from_dict)
        logger.debug(f"Fetched {len(matches)} matches")
        return matches

    @staticmethod
    def _parse_rows(endpoint: str, payload: Any, parse: Callable[[dict], T]) -> List[T]:
        if not isinstance(payload, list):
            # Error bodies come back as {"error": "..."}
            raise FetchFailure(endpoint, f"expected a JSON array, got {type(payload).__name__}")

        rows = []
        for row in payload:
            if not isinstance(row, dict):
                logger.warning(f"Skipping non-object row from {endpoint}: {row!r}")
                continue
            try:
                rows.append(parse(row))
            except ShapeMismatch as e:
                logger.warning(f"Skipping row from {endpoint}: {e}")
        return rows
