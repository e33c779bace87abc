"""
turn_engine.py
One simulated studio week:
- Pops the next player command and routes it (declare / answer / ignored)
- Fans Producer, Marketing and (when new facts arrived) Inquisitor out as tasks
- Joins them, advances the week and recomputes design completeness
Release is triggered from inside the Producer when the build hits 100%.
"""

import asyncio
import logging
import random
from typing import Optional

from chimera.agents.inquisitor_agent import InquisitorAgent
from chimera.agents.marketing_agent import MarketingAgent
from chimera.agents.producer_agent import ProducerAgent
from chimera.agents.translator_agent import TranslatorAgent
from chimera.engine.commands import AnswerCommand, DeclareCommand, parse_command
from chimera.engine.state import GameState, SimulationState
from chimera.llm_client import TextGenerationClient

logger = logging.getLogger(__name__)

# Marketing switches on once the current week exceeds this
MARKETING_START_WEEK = 5


class TurnEngine:
    """
    Owns the SimulationState and runs turns against it. Not re-entrant:
    advance_week() refuses to start while agents are still working.
    """

    def __init__(self, llm=None, rng: Optional[random.Random] = None,
                 state: Optional[SimulationState] = None, project_name: Optional[str] = None):
        if llm is None:
            llm = TextGenerationClient()

        if state is None:
            state = SimulationState(GameState(project_name=project_name) if project_name else None)

        self.state = state
        self.llm = llm
        self.rng = rng or random.Random()

        self.inquisitor = InquisitorAgent(llm)
        self.producer = ProducerAgent(llm, rng=self.rng)
        self.marketing = MarketingAgent(llm)

    # ---------------------------
    # Queue helpers
    # ---------------------------
    def enqueue_command(self, command: str) -> None:
        self.state.game.command_queue.append(command)

    def can_advance(self) -> bool:
        return not (self.state.game.game_released or self.state.is_waiting_for_agents)

    def _set_waiting(self, waiting: bool, status_text: str) -> None:
        self.state.is_waiting_for_agents = waiting
        self.state.agent_status_text = status_text

    # ---------------------------
    # Command routing
    # ---------------------------
    def process_command(self, raw: Optional[str]) -> bool:
        """Route one command. Returns True when the Inquisitor should run this week."""
        command = parse_command(raw)
        if isinstance(command, DeclareCommand):
            return TranslatorAgent.translate(self.state, command.text)
        if isinstance(command, AnswerCommand):
            return TranslatorAgent.resolve_answer(self.state, command)

        if command.text.strip():
            logger.info("Ignoring unrecognised command: %r", command.text[:60])
        return False

    async def _run_agent(self, name: str, coro) -> None:
        """Await one agent; a crash is logged and reported, never propagated to the join."""
        try:
            await coro
        except Exception as e:
            logger.exception("Agent '%s' failed: %s", name, e)
            self.state.set_activity(name, f"Error: {e}")

    # ---------------------------
    # Turn
    # ---------------------------
    async def advance_week(self) -> bool:
        """Run one week. Returns False if the turn could not start."""
        if not self.can_advance():
            return False

        state = self.state
        game = state.game

        command = game.command_queue.pop(0) if game.command_queue else None
        processed = self.process_command(command)

        self._set_waiting(True, "Agents are thinking...")
        logger.info("Week %d: agents running (inquisitor=%s)", game.current_week, processed)

        if game.current_week > MARKETING_START_WEEK:
            game.marketing_active = True

        # Producer reads the question backlog before Inquisitor can extend it
        tasks = [
            asyncio.create_task(self._run_agent(ProducerAgent.NAME, self.producer.run(state))),
            asyncio.create_task(self._run_agent(MarketingAgent.NAME, self.marketing.run(state))),
        ]
        if processed:
            tasks.append(asyncio.create_task(
                self._run_agent(InquisitorAgent.NAME, self.inquisitor.run(state))
            ))

        await asyncio.gather(*tasks)

        self._set_waiting(False, "Thinking complete. Proceeding to next week.")

        game.current_week += 1
        state.recompute_design_completeness()

        logger.info(
            "Week %d done: build=%.1f%% design=%.1f%% hype=%.1f bugs=%d budget=%s",
            game.current_week - 1, game.build_progress, game.design_completeness,
            game.market_hype, game.bugs, game.budget,
        )
        return True
