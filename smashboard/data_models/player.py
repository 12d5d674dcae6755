"""
Player data models for the leaderboard engine.

Provides immutable data transfer objects for players as returned by the
data service and for the derived per-player statistics.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from smashboard.utils import coercion


@dataclass(frozen=True)
class Player:
    """A player row from ``GET /players``."""
    id: int
    name: str
    elo: int
    display_name: Optional[str] = None
    created_at: Optional[datetime] = None
    main_character: Optional[str] = None
    total_wins: Optional[int] = None
    total_losses: Optional[int] = None
    total_kos: Optional[int] = None
    total_falls: Optional[int] = None
    total_sds: Optional[int] = None

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Player':
        """Build a player from a JSON row, tolerating missing or null fields."""
        return cls(
            id=coercion.require_id(row),
            name=coercion.optional_str(row, "name") or "",
            elo=coercion.int_or_zero(row, "elo"),
            display_name=coercion.optional_str(row, "display_name"),
            created_at=coercion.timestamp(row),
            main_character=coercion.optional_str(row, "main_character"),
            total_wins=coercion.optional_int(row, "total_wins"),
            total_losses=coercion.optional_int(row, "total_losses"),
            total_kos=coercion.optional_int(row, "total_kos"),
            total_falls=coercion.optional_int(row, "total_falls"),
            total_sds=coercion.optional_int(row, "total_sds"),
        )

    @property
    def shown_name(self) -> str:
        return self.display_name or self.name

    @property
    def initials(self) -> str:
        return "".join(part[0] for part in self.shown_name.split(" ") if part).upper()


@dataclass(frozen=True)
class DerivedPlayer:
    """Player with every counter resolved to an int plus derived stats."""
    player: Player
    total_wins: int
    total_losses: int
    total_kos: int
    total_falls: int
    total_sds: int
    matches: int
    main_character: Optional[str] = None

    @property
    def id(self) -> int:
        return self.player.id

    @property
    def elo(self) -> int:
        return self.player.elo

    @property
    def shown_name(self) -> str:
        return self.player.shown_name

    @property
    def initials(self) -> str:
        return self.player.initials

    @property
    def win_rate(self) -> float:
        """Fraction of matches won; 0 when no matches were played."""
        decided = self.total_wins + self.total_losses
        if decided <= 0:
            return 0.0
        return self.total_wins / decided

    @property
    def kd_ratio(self) -> float:
        """KOs per life lost; 0 when there are no KOs or no lives lost."""
        deaths = self.total_falls + self.total_sds
        if self.total_kos <= 0 or deaths <= 0:
            return 0.0
        return self.total_kos / deaths
