"""
Leaderboard Cog - live rankings, tier list and match history

Owns the refresh scheduler: it starts when the cog loads and both timers
are torn down when the cog unloads. Every message posted by the commands
below is kept live and redrawn after each refresh cycle.
"""

import discord
from discord import app_commands
from discord.ext import commands
from typing import Dict, Tuple

from smashboard.config import Config
from smashboard.data_models.leaderboard import Tier
from smashboard.services.data_client import DataServiceClient
from smashboard.services.refresh_scheduler import RefreshScheduler
from smashboard.utils.embeds import build_error_embed
from smashboard.utils.logger import setup_logger
from smashboard.utils.stats import format_kd_ratio, format_win_rate
from smashboard.utils.tiers import TierClassifier
from smashboard.views.leaderboard import LeaderboardTabsView

logger = setup_logger(__name__)


class LeaderboardCog(commands.Cog):
    """Live Smash leaderboard commands"""

    def __init__(self, bot, client: DataServiceClient = None, scheduler: RefreshScheduler = None):
        self.bot = bot
        self.client = client or DataServiceClient(Config.DATA_SERVICE_URL, Config.HTTP_TIMEOUT_SECONDS)
        self.scheduler = scheduler or RefreshScheduler(
            self.client,
            interval=Config.REFRESH_INTERVAL_SECONDS,
            tick=Config.COUNTDOWN_TICK_SECONDS
        )
        # message_id -> (message, view)
        self._live_messages: Dict[int, Tuple[discord.Message, LeaderboardTabsView]] = {}

    async def cog_load(self):
        """Start the refresh loop when the cog is mounted"""
        self.scheduler.add_listener(self._on_refresh)
        self.scheduler.start()
        logger.info("LeaderboardCog: refresh scheduler started")

    async def cog_unload(self):
        """Stop both timers and release the HTTP session"""
        self.scheduler.stop()
        self.scheduler.remove_listener(self._on_refresh)
        for _, view in self._live_messages.values():
            view.stop()
        self._live_messages.clear()
        await self.client.close()
        logger.info("LeaderboardCog: refresh scheduler stopped")

    async def _on_refresh(self, scheduler: RefreshScheduler):
        """Redraw every live leaderboard message with the new snapshot."""
        for message_id, (message, view) in list(self._live_messages.items()):
            try:
                await view.sync_message(message)
            except discord.NotFound:
                # Message was deleted
                self._forget(message_id)
            except discord.HTTPException as e:
                logger.warning(f"Failed to update leaderboard message {message_id}: {e}")

    def _forget(self, message_id: int):
        entry = self._live_messages.pop(message_id, None)
        if entry:
            entry[1].stop()

    def _expire(self, view: LeaderboardTabsView):
        for message_id, (_, live_view) in list(self._live_messages.items()):
            if live_view is view:
                self._live_messages.pop(message_id, None)

    async def _send_live(self, interaction: discord.Interaction, tab: str):
        view = LeaderboardTabsView(self.scheduler, active_tab=tab, on_expire=self._expire)
        await interaction.response.send_message(embed=view.current_embed(), view=view)
        message = await interaction.original_response()
        self._live_messages[message.id] = (message, view)

    @app_commands.command(name="leaderboard", description="View the live Smash rankings")
    async def leaderboard(self, interaction: discord.Interaction):
        """Display the rankings tab."""
        try:
            await self._send_live(interaction, "rankings")
        except Exception as e:
            logger.error(f"Error in leaderboard command: {e}", exc_info=True)
            await self._send_error(interaction, "An error occurred while showing the leaderboard. Please try again later.")

    @app_commands.command(name="tierlist", description="View the official tier list")
    async def tierlist(self, interaction: discord.Interaction):
        """Display the tier list tab."""
        try:
            await self._send_live(interaction, "tiers")
        except Exception as e:
            logger.error(f"Error in tierlist command: {e}", exc_info=True)
            await self._send_error(interaction, "An error occurred while showing the tier list. Please try again later.")

    @app_commands.command(name="matches", description="View recent matches")
    async def matches(self, interaction: discord.Interaction):
        """Display the match history tab."""
        try:
            await self._send_live(interaction, "matches")
        except Exception as e:
            logger.error(f"Error in matches command: {e}", exc_info=True)
            await self._send_error(interaction, "An error occurred while showing match history. Please try again later.")

    @app_commands.command(name="player", description="View a player's stats and tier")
    @app_commands.describe(name="Player name or display name")
    async def player(self, interaction: discord.Interaction, name: str):
        """Show one player's line from the current snapshot."""
        snapshot = self.scheduler.snapshot
        if snapshot is None:
            await self._send_error(interaction, "The leaderboard is still loading. Please try again shortly.")
            return

        needle = name.strip().lower()
        found = next(
            (p for p in snapshot.ranked if needle in (p.player.name.lower(), p.shown_name.lower())),
            None
        )
        if found is None:
            await self._send_error(interaction, f"No player named '{name}' on the leaderboard.")
            return

        tier = snapshot.tier_of(found.id) or TierClassifier.classify(found.elo, snapshot.thresholds)
        embed = discord.Embed(
            title=f"{found.shown_name} ({found.initials})",
            color=discord.Color.gold() if snapshot.rank_of(found.id) == 1 else discord.Color.blue()
        )
        embed.add_field(
            name="📊 Rating",
            value=(
                f"**ELO:** {found.elo}\n"
                f"**Rank:** #{snapshot.rank_of(found.id)} / {snapshot.total_players}\n"
                f"**Tier:** {tier.value}"
            ),
            inline=True
        )
        embed.add_field(
            name="⚔️ Record",
            value=(
                f"**Matches:** {found.matches}\n"
                f"**Wins:** {found.total_wins} | **Losses:** {found.total_losses}\n"
                f"**Win Rate:** {format_win_rate(found)}\n"
                f"**K/D:** {format_kd_ratio(found)}"
            ),
            inline=True
        )
        if found.main_character:
            embed.add_field(name="🎮 Main", value=found.main_character, inline=True)
        await interaction.response.send_message(embed=embed)

    @player.autocomplete('name')
    async def player_autocomplete(
        self,
        interaction: discord.Interaction,
        current: str,
    ) -> list[app_commands.Choice[str]]:
        """Provide player name suggestions."""
        snapshot = self.scheduler.snapshot
        if snapshot is None:
            return []
        return [
            app_commands.Choice(name=p.shown_name, value=p.shown_name)
            for p in snapshot.ranked
            if current.lower() in p.shown_name.lower()
        ][:25]  # Discord limit

    @commands.command(name='tiers')
    async def show_tiers(self, ctx):
        """Show current tier cutoffs (legacy prefix command)"""
        snapshot = self.scheduler.snapshot
        thresholds = snapshot.thresholds if snapshot else TierClassifier.fixed_thresholds()
        embed = discord.Embed(
            title="Tier Cutoffs",
            description="\n".join(TierClassifier.describe(thresholds)),
            color=discord.Color.green()
        )
        if snapshot:
            counts = ", ".join(f"{t.value}: {len(snapshot.buckets.get(t, ()))}" for t in Tier)
            embed.set_footer(text=f"Players per tier - {counts}")
        await ctx.send(embed=embed)

    async def _send_error(self, interaction: discord.Interaction, message: str):
        embed = build_error_embed(message)
        if interaction.response.is_done():
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.response.send_message(embed=embed, ephemeral=True)


async def setup(bot):
    await bot.add_cog(LeaderboardCog(bot))
