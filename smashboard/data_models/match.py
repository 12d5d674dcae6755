"""
Match data models for the leaderboard engine.

Mirrors the ``GET /matches`` contract: each match carries its participants
in the order the data service returned them.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from smashboard.utils import coercion


@dataclass(frozen=True)
class MatchParticipant:
    """A player's record within one match."""
    id: int
    player: Optional[int]
    player_name: str
    player_display_name: Optional[str]
    smash_character: Optional[str]
    is_cpu: bool
    total_kos: int
    total_falls: int
    total_sds: int
    has_won: bool

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'MatchParticipant':
        return cls(
            id=coercion.int_or_zero(row, "id"),
            player=coercion.optional_int(row, "player"),
            player_name=coercion.optional_str(row, "player_name") or "",
            player_display_name=coercion.optional_str(row, "player_display_name"),
            smash_character=coercion.optional_str(row, "smash_character"),
            is_cpu=coercion.flag(row, "is_cpu"),
            total_kos=coercion.int_or_zero(row, "total_kos"),
            total_falls=coercion.int_or_zero(row, "total_falls"),
            total_sds=coercion.int_or_zero(row, "total_sds"),
            has_won=coercion.flag(row, "has_won"),
        )

    @property
    def shown_name(self) -> str:
        return self.player_display_name or self.player_name


@dataclass(frozen=True)
class Match:
    """A completed match with its ordered participants."""
    id: int
    created_at: Optional[datetime]
    participants: Tuple[MatchParticipant, ...] = ()

    @classmethod
    def from_dict(cls, row: Mapping[str, Any]) -> 'Match':
        raw_participants = row.get("participants") or []
        if not isinstance(raw_participants, list):
            raw_participants = []
        return cls(
            id=coercion.require_id(row),
            created_at=coercion.timestamp(row),
            participants=tuple(
                MatchParticipant.from_dict(p) for p in raw_participants if isinstance(p, dict)
            ),
        )

    @property
    def winners(self) -> Tuple[MatchParticipant, ...]:
        return tuple(p for p in self.participants if p.has_won)

    def with_participants(self, participants) -> 'Match':
        return replace(self, participants=tuple(participants))
