"""
Shared embed utilities for the Smash leaderboard bot.

Provides the embed builders for the rankings tab, the tier list tab and the
match history so the cog and the interactive view render identically.
"""

import discord
from typing import List, Optional

from smashboard.constants import UIConstants
from smashboard.data_models.leaderboard import (
    TIER_ORDER, LeaderboardSnapshot, RefreshStatus, Tier
)
from smashboard.data_models.match import Match, MatchParticipant
from smashboard.services.leaderboard import LeaderboardView
from smashboard.utils.stats import format_kd_ratio, format_win_rate
from smashboard.utils.tiers import TierClassifier

# Discord hard limit for a single field value
FIELD_VALUE_LIMIT = 1024


def refresh_status_text(status: RefreshStatus) -> str:
    """One-line refresh indicator: in-progress marker or seconds until next fetch."""
    if status.loading:
        return "Loading..."
    if status.refreshing:
        return f"{UIConstants.REFRESH_EMOJI} Refreshing..."
    text = f"{UIConstants.REFRESH_EMOJI} Refreshing in {status.countdown}s"
    if status.last_updated:
        text += f" | Last updated {status.last_updated.strftime('%H:%M:%S')} UTC"
    return text


def _truncate(text: str, limit: int = FIELD_VALUE_LIMIT) -> str:
    if len(text) <= limit:
        return text
    return text[:limit - 4].rstrip() + "\n..."


def _add_error_banner(embed: discord.Embed, status: Optional[RefreshStatus]):
    if status and status.error:
        embed.add_field(name="⚠️ Error", value=status.error, inline=False)


def build_loading_embed() -> discord.Embed:
    return discord.Embed(
        title="Smash Tournament ELO",
        description="Loading players...",
        color=UIConstants.HEADER_COLOR
    )


def build_rankings_embed(
    snapshot: Optional[LeaderboardSnapshot],
    status: Optional[RefreshStatus] = None,
    page: int = 1,
    page_size: int = UIConstants.MAX_RANKING_ROWS
) -> discord.Embed:
    """
    Build the rankings table embed.

    Args:
        snapshot: Current leaderboard snapshot (None before the first load)
        status: Refresh status for the footer and error banner
        page: 1-based page of the ranking to show
        page_size: Rows per page

    Returns:
        Formatted Discord embed ready for display
    """
    embed = discord.Embed(
        title=f"{UIConstants.TROPHY_EMOJI} Rankings",
        color=UIConstants.GOLD_RANK_COLOR
    )
    _add_error_banner(embed, status)

    if snapshot is None or not snapshot.ranked:
        embed.description = "No players found."
        if status:
            embed.set_footer(text=refresh_status_text(status))
        return embed

    entries, total_pages = LeaderboardView.paginate(snapshot.ranked, page, page_size)

    lines = ["```"]
    lines.append(f"{'#':<4} {'Player':<16} {'ELO':<6} {'Tier':<5} {'W-L':<8} {'Win%':<7} {'K/D':<5}")
    lines.append("-" * 57)
    for rank, player in entries:
        tier = snapshot.tier_of(player.id) or TierClassifier.classify(player.elo, snapshot.thresholds)
        record = f"{player.total_wins}-{player.total_losses}"
        lines.append(
            f"{rank:<4} {player.shown_name[:16]:<16} {player.elo:<6} {tier.value:<5} "
            f"{record:<8} {format_win_rate(player):<7} {format_kd_ratio(player):<5}"
        )
    lines.append("```")
    embed.description = "\n".join(lines)

    footer = f"Page {page}/{total_pages} | Total Players: {snapshot.total_players}"
    if status:
        footer += f" | {refresh_status_text(status)}"
    embed.set_footer(text=footer)
    return embed


def build_tier_list_embed(
    snapshot: Optional[LeaderboardSnapshot],
    status: Optional[RefreshStatus] = None
) -> discord.Embed:
    """Build the tier list embed: one field per tier, best first."""
    embed = discord.Embed(
        title="Official Tier List",
        color=UIConstants.TIER_COLORS[Tier.S.value]
    )
    _add_error_banner(embed, status)

    if snapshot is None or not snapshot.ranked:
        embed.description = "No players found."
        if status:
            embed.set_footer(text=refresh_status_text(status))
        return embed

    for tier in TIER_ORDER:
        members = snapshot.buckets.get(tier, ())
        cutoff = snapshot.thresholds.get(tier)
        name = f"{tier.value} Tier ({cutoff}+)" if cutoff is not None else f"{tier.value} Tier"
        value = ", ".join(f"`{p.initials}` **{p.shown_name}** ({p.elo})" for p in members) if members else "—"
        embed.add_field(name=name, value=_truncate(value), inline=False)

    if status:
        embed.set_footer(text=refresh_status_text(status))
    return embed


def _participant_line(participant: MatchParticipant) -> str:
    marker = UIConstants.TROPHY_EMOJI if participant.has_won else "▫️"
    name = participant.shown_name or "Unknown"
    if participant.is_cpu:
        name = f"{UIConstants.CPU_EMOJI} {name}"
    character = f" ({participant.smash_character})" if participant.smash_character else ""
    return (
        f"{marker} {name}{character} - "
        f"KOs {participant.total_kos} / Falls {participant.total_falls} / SDs {participant.total_sds}"
    )


def build_match_history_embed(
    snapshot: Optional[LeaderboardSnapshot],
    limit: int = UIConstants.MAX_MATCHES_SHOWN
) -> discord.Embed:
    """Build the recent matches embed; participants are already winners-first."""
    embed = discord.Embed(
        title="⚔️ Recent Matches",
        color=UIConstants.DEFAULT_EMBED_COLOR
    )

    matches: List[Match] = list(snapshot.matches[:limit]) if snapshot else []
    if not matches:
        embed.description = "No matches recorded yet."
        return embed

    for match in matches:
        played = match.created_at.strftime('%Y-%m-%d %H:%M') if match.created_at else "unknown time"
        value = "\n".join(_participant_line(p) for p in match.participants) or "No participants."
        embed.add_field(name=f"Match #{match.id} | {played}", value=_truncate(value), inline=False)

    embed.set_footer(text=f"Showing {len(matches)} of {len(snapshot.matches)} matches")
    return embed


def build_error_embed(message: str) -> discord.Embed:
    return discord.Embed(
        title="Error",
        description=message,
        color=UIConstants.ERROR_COLOR
    )
