"""
Per-player statistics roll-up.

Turns raw player rows (and optionally match participant rows) into
DerivedPlayer objects whose counters are always plain integers.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from smashboard.data_models.match import Match
from smashboard.data_models.player import DerivedPlayer, Player


@dataclass
class ParticipantTotals:
    """Lifetime counters accumulated from match participant rows."""
    wins: int = 0
    losses: int = 0
    kos: int = 0
    falls: int = 0
    sds: int = 0
    matches: int = 0
    characters: Counter = field(default_factory=Counter)

    @property
    def main_character(self) -> Optional[str]:
        # Counter.most_common keeps first-seen order among equal counts
        if not self.characters:
            return None
        return self.characters.most_common(1)[0][0]


class StatsRollup:
    """Derives aggregate counters for players"""

    @staticmethod
    def rollup_participants(matches: Iterable[Match]) -> Dict[int, ParticipantTotals]:
        """
        Sum every non-CPU participant record per player.

        Participants without a player id are skipped since they cannot be
        attributed to anyone on the leaderboard.
        """
        totals: Dict[int, ParticipantTotals] = defaultdict(ParticipantTotals)
        for match in matches:
            for participant in match.participants:
                if participant.is_cpu or participant.player is None:
                    continue
                entry = totals[participant.player]
                entry.matches += 1
                if participant.has_won:
                    entry.wins += 1
                else:
                    entry.losses += 1
                entry.kos += participant.total_kos
                entry.falls += participant.total_falls
                entry.sds += participant.total_sds
                if participant.smash_character:
                    entry.characters[participant.smash_character] += 1
        return dict(totals)

    @staticmethod
    def attach_derived(player: Player, totals: Optional[ParticipantTotals] = None) -> DerivedPlayer:
        """
        Resolve a player's counters and derive ``matches``.

        Counters present on the player row win; counters the row leaves
        null are taken from ``totals`` when given, otherwise treated as 0.
        """
        def pick(own: Optional[int], fallback: int) -> int:
            return own if own is not None else fallback

        wins = pick(player.total_wins, totals.wins if totals else 0)
        losses = pick(player.total_losses, totals.losses if totals else 0)
        main_character = player.main_character
        if main_character is None and totals is not None:
            main_character = totals.main_character

        return DerivedPlayer(
            player=player,
            total_wins=wins,
            total_losses=losses,
            total_kos=pick(player.total_kos, totals.kos if totals else 0),
            total_falls=pick(player.total_falls, totals.falls if totals else 0),
            total_sds=pick(player.total_sds, totals.sds if totals else 0),
            matches=wins + losses,
            main_character=main_character,
        )


def format_win_rate(player: DerivedPlayer) -> str:
    """Win rate as a percentage with one decimal place, e.g. ``66.7%``."""
    return f"{player.win_rate * 100:.1f}%"


def format_kd_ratio(player: DerivedPlayer) -> str:
    """K/D ratio with two decimal places, e.g. ``1.50``."""
    return f"{player.kd_ratio:.2f}"
