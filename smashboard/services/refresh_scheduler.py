"""
Background refresh scheduler for the live leaderboard.

Owns two repeating timers built on discord.ext.tasks: a fetch loop that
re-reads players and matches from the data service, and a countdown loop
that only drives the "Refreshing in Ns" indicator. The live snapshot and
the refresh status are written here and read everywhere else.
"""

import asyncio
from datetime import datetime, timezone
from typing import Awaitable, Callable, List, Optional

from discord.ext import tasks

from smashboard.config import Config
from smashboard.constants import RefreshConstants
from smashboard.data_models.leaderboard import LeaderboardSnapshot, RefreshState, RefreshStatus
from smashboard.data_models.match import Match
from smashboard.data_models.player import Player
from smashboard.services.data_client import DataServiceClient
from smashboard.services.leaderboard import LeaderboardView
from smashboard.utils.exceptions import FetchFailure
from smashboard.utils.logger import setup_logger

logger = setup_logger(__name__)

Listener = Callable[['RefreshScheduler'], Awaitable[None]]


class RefreshScheduler:
    """Periodic fetch-and-recompute loop with a staleness countdown."""

    def __init__(
        self,
        client: DataServiceClient,
        interval: float = Config.REFRESH_INTERVAL_SECONDS,
        tick: float = Config.COUNTDOWN_TICK_SECONDS
    ):
        if interval <= 0 or tick <= 0:
            raise ValueError("interval and tick must be positive")

        self.client = client
        self.interval = interval
        self.snapshot: Optional[LeaderboardSnapshot] = None
        self.state = RefreshState.IDLE
        self.error: Optional[str] = None
        self.countdown = self._full_countdown()
        self.last_updated: Optional[datetime] = None

        # Last good rows per source
        self._players: List[Player] = []
        self._matches: List[Match] = []

        self._listeners: List[Listener] = []
        self._in_flight = 0
        self._running = False

        self._fetch_loop = tasks.loop(seconds=interval)(self._fetch_tick)
        self._countdown_loop = tasks.loop(seconds=tick)(self._countdown_tick)

    def start(self):
        """Start both timers; the first fetch runs immediately. No-op when running."""
        if self._running:
            return
        self._running = True
        for loop in (self._fetch_loop, self._countdown_loop):
            if loop.is_running():
                # Still winding down from a previous stop()
                loop.restart()
            else:
                loop.start()
        logger.info(f"Refresh scheduler started (every {self.interval}s)")

    def stop(self):
        """Cancel both timers. Safe to call any number of times."""
        self._fetch_loop.cancel()
        self._countdown_loop.cancel()
        if self._running:
            self._running = False
            self.state = RefreshState.STOPPED
            logger.info("Refresh scheduler stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    def add_listener(self, listener: Listener):
        """Register an async callback invoked after every fetch cycle."""
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dismiss_error(self):
        self.error = None

    @property
    def status(self) -> RefreshStatus:
        return RefreshStatus(
            state=self.state,
            countdown=self.countdown,
            error=self.error,
            last_updated=self.last_updated,
        )

    async def refresh(self):
        """Run one background cycle on demand."""
        await self.run_cycle(background=True)

    async def run_cycle(self, background: bool = True):
        """
        Fetch both sources and rebuild the snapshot.

        Players are the primary source: a failure keeps the previous
        snapshot and sets the error banner. Matches are secondary: a failure
        is logged and the last good match list is reused.

        Args:
            background: False for the initial load (LOADING), True otherwise
        """
        self._in_flight += 1
        self.state = RefreshState.REFRESHING if background else RefreshState.LOADING
        try:
            players, matches = await asyncio.gather(
                self._fetch_players(), self._fetch_matches()
            )

            # Applied in arrival order; an overlapping cycle that lands later wins
            if matches is not None:
                self._matches = matches

            if players is not None:
                self._players = players
                self.snapshot = LeaderboardView.build_snapshot(self._players, self._matches)
                self.last_updated = datetime.now(timezone.utc)
                self.countdown = self._full_countdown()
                self.error = None
            else:
                self.error = RefreshConstants.PLAYERS_ERROR_MESSAGE
        finally:
            self._in_flight -= 1
            # stop() during a fetch leaves the scheduler STOPPED
            if self._in_flight == 0 and self.state is not RefreshState.STOPPED:
                self.state = RefreshState.READY

        await self._notify()

    async def _fetch_players(self) -> Optional[List[Player]]:
        try:
            return await self.client.fetch_players()
        except FetchFailure as e:
            logger.error(f"Error fetching players: {e}")
            return None

    async def _fetch_matches(self) -> Optional[List[Match]]:
        try:
            return await self.client.fetch_matches()
        except FetchFailure as e:
            # Non-fatal; retried on the next cycle
            logger.warning(f"Error fetching matches: {e}")
            return None

    async def _notify(self):
        for listener in list(self._listeners):
            try:
                await listener(self)
            except Exception as e:
                logger.error(f"Refresh listener {listener!r} failed: {e}", exc_info=True)

    async def _fetch_tick(self):
        try:
            # Only the very first load blocks the view
            background = self._fetch_loop.current_loop > 0 or self.snapshot is not None
            await self.run_cycle(background=background)
        except Exception as e:
            logger.error(f"Error in refresh cycle: {e}", exc_info=True)

    async def _countdown_tick(self):
        # The loop fires immediately on start; the first real tick is one period later
        if self._countdown_loop.current_loop == 0:
            return
        self.advance_countdown()

    def advance_countdown(self):
        """One countdown step; wraps back to the full interval after 1."""
        if self.countdown <= 1:
            self.countdown = self._full_countdown()
        else:
            self.countdown -= 1

    def _full_countdown(self) -> int:
        return max(1, round(self.interval))
