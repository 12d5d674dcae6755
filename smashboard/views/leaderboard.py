"""
Leaderboard view components for the Smash leaderboard bot.

Provides the interactive Discord UI for the live leaderboard: tab
switching between rankings, tier list and matches, pagination of the
rankings, an on-demand refresh and a dismiss button for the error banner.
"""

import discord
from discord.ui import View, Button
from typing import Callable, Optional

from smashboard.constants import UIConstants
from smashboard.services.leaderboard import LeaderboardView
from smashboard.services.refresh_scheduler import RefreshScheduler
from smashboard.utils.embeds import (
    build_loading_embed, build_match_history_embed, build_rankings_embed, build_tier_list_embed
)


TABS = ("rankings", "tiers", "matches")


class LeaderboardTabsView(View):
    """Tabbed, live leaderboard view backed by the refresh scheduler."""

    def __init__(
        self,
        scheduler: RefreshScheduler,
        active_tab: str = "rankings",
        *,
        page_size: int = UIConstants.MAX_RANKING_ROWS,
        on_expire: Optional[Callable[['LeaderboardTabsView'], None]] = None,
        timeout: int = 900
    ):
        super().__init__(timeout=timeout)
        if active_tab not in TABS:
            raise ValueError(f"active_tab must be one of {', '.join(TABS)}")
        self.scheduler = scheduler
        self.active_tab = active_tab
        self.page_size = page_size
        self.current_page = 1
        self.on_expire = on_expire

        self._update_buttons()

    @property
    def total_pages(self) -> int:
        snapshot = self.scheduler.snapshot
        if snapshot is None:
            return 1
        _, total_pages = LeaderboardView.paginate(snapshot.ranked, 1, self.page_size)
        return total_pages

    def current_embed(self) -> discord.Embed:
        """Embed for the active tab built from the scheduler's live snapshot."""
        snapshot = self.scheduler.snapshot
        status = self.scheduler.status
        if snapshot is None and status.loading:
            return build_loading_embed()
        if self.active_tab == "tiers":
            return build_tier_list_embed(snapshot, status)
        if self.active_tab == "matches":
            return build_match_history_embed(snapshot)
        # Player count may have shrunk since the page was chosen
        self.current_page = min(self.current_page, self.total_pages)
        return build_rankings_embed(snapshot, status, self.current_page, self.page_size)

    def _update_buttons(self):
        """Rebuild buttons for the active tab and current state."""
        self.clear_items()

        for tab, label in (("rankings", "Rankings"), ("tiers", "Tier List"), ("matches", "Matches")):
            button = Button(
                label=label,
                style=discord.ButtonStyle.primary if tab == self.active_tab else discord.ButtonStyle.secondary,
                custom_id=f"leaderboard:tab:{tab}"
            )
            button.callback = self._make_tab_callback(tab)
            self.add_item(button)

        refresh_button = Button(
            label="Refresh",
            emoji=UIConstants.REFRESH_EMOJI,
            style=discord.ButtonStyle.success,
            disabled=self.scheduler.status.refreshing,
            custom_id="leaderboard:refresh"
        )
        refresh_button.callback = self.refresh
        self.add_item(refresh_button)

        if self.active_tab == "rankings" and self.total_pages > 1:
            prev_button = Button(
                label="Previous",
                style=discord.ButtonStyle.primary,
                disabled=self.current_page <= 1,
                custom_id="leaderboard:prev",
                row=1
            )
            prev_button.callback = self.previous_page
            self.add_item(prev_button)

            next_button = Button(
                label="Next",
                style=discord.ButtonStyle.primary,
                disabled=self.current_page >= self.total_pages,
                custom_id="leaderboard:next",
                row=1
            )
            next_button.callback = self.next_page
            self.add_item(next_button)

        if self.scheduler.error:
            dismiss_button = Button(
                label="Dismiss Error",
                style=discord.ButtonStyle.danger,
                custom_id="leaderboard:dismiss",
                row=1
            )
            dismiss_button.callback = self.dismiss_error
            self.add_item(dismiss_button)

    def _make_tab_callback(self, tab: str):
        async def callback(interaction: discord.Interaction):
            self.active_tab = tab
            await self._rerender(interaction)
        return callback

    async def previous_page(self, interaction: discord.Interaction):
        """Navigate to previous page."""
        if self.current_page > 1:
            self.current_page -= 1
        await self._rerender(interaction)

    async def next_page(self, interaction: discord.Interaction):
        """Navigate to next page."""
        if self.current_page < self.total_pages:
            self.current_page += 1
        await self._rerender(interaction)

    async def dismiss_error(self, interaction: discord.Interaction):
        self.scheduler.dismiss_error()
        await self._rerender(interaction)

    async def refresh(self, interaction: discord.Interaction):
        """
        Run a background refresh now; the old data stays visible meanwhile.

        Live messages are redrawn by the scheduler's listeners once the
        cycle completes.
        """
        await interaction.response.defer()
        await self.scheduler.refresh()

    async def _rerender(self, interaction: discord.Interaction):
        self._update_buttons()
        await interaction.response.edit_message(embed=self.current_embed(), view=self)

    async def sync_message(self, message: Optional[discord.Message]):
        """Redraw ``message`` with the latest snapshot."""
        if message is None:
            return
        self._update_buttons()
        await message.edit(embed=self.current_embed(), view=self)

    async def on_timeout(self):
        if self.on_expire:
            self.on_expire(self)
