# backend/chimera/engine/runner.py
"""
Automatic progression and command submission on top of a TurnEngine.
Stopping only prevents the next turn from being scheduled; a running turn always finishes.
"""

import asyncio
import logging
from typing import Optional

from chimera.config import CONFIG
from chimera.engine.turn_engine import TurnEngine

logger = logging.getLogger(__name__)


class SimulationRunner:
    def __init__(self, engine: TurnEngine, interval_seconds: Optional[float] = None):
        self.engine = engine
        self.interval_seconds = CONFIG["TURN_INTERVAL_SECONDS"] if interval_seconds is None else interval_seconds
        self.is_running = False
        self._loop_task: Optional[asyncio.Task] = None

    # -------------------------------------------------------
    def submit_command(self, text: str) -> None:
        """
        While stopped, a submission replaces the command at the front of the
        queue (it overrides the seeded opening command). Otherwise non-blank
        text is appended.
        """
        queue = self.engine.state.game.command_queue
        if not self.is_running and queue:
            queue[0] = text
            return

        if text.strip():
            queue.append(text)

    def command_hint(self) -> str:
        open_questions = self.engine.state.questions.open_questions()
        if open_questions:
            return f"e.g., /answer {open_questions[0].id} ..."
        return "e.g., /declare The main villain is..."

    # -------------------------------------------------------
    def set_interval(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError("Turn interval must be positive.")
        self.interval_seconds = seconds

    def toggle(self) -> bool:
        """Start or stop automatic progression. Returns the new running flag."""
        if self.engine.state.game.game_released:
            self.is_running = False
            return False

        self.is_running = not self.is_running
        if self.is_running:
            if self._loop_task is None or self._loop_task.done():
                self._loop_task = asyncio.create_task(self._loop())
            logger.info("Auto-play started (interval %.2fs)", self.interval_seconds)
        else:
            logger.info("Auto-play stopped")
        return self.is_running

    async def _loop(self) -> None:
        while self.is_running:
            await self.engine.advance_week()
            if self.engine.state.game.game_released:
                self.is_running = False
                break
            if not self.is_running:
                break
            await asyncio.sleep(self.interval_seconds)

    async def wait_stopped(self) -> None:
        """Wait for the auto-play loop to finish its current cycle after a stop."""
        if self._loop_task is not None:
            await self._loop_task
