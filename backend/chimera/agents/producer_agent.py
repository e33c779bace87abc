# backend/chimera/agents/producer_agent.py

import logging
import random
from typing import Optional

from chimera.engine.scoring import release_game
from chimera.engine.state import BugReport, SimulationState
from chimera.llm_client import is_fallback

logger = logging.getLogger(__name__)


class ProducerAgent:
    """
    Pragmatic producer. Spends the weekly budget, pushes the build forward
    (slower with every open question) and files bugs blamed on open questions.
    """

    NAME = "producer"

    SYSTEM_PROMPT = (
        "You are a pragmatic producer. An unresolved design question has caused a bug. "
        "Describe the bug in a short, technical-sounding but slightly humorous bug report. "
        "Start with 'Bug #[ID]: ' but replace [ID] with a random 3-digit number."
    )

    BASE_PROGRESS = 5.0
    PROGRESS_PENALTY_PER_QUESTION = 0.5
    MIN_PROGRESS = 0.5
    BUG_CHANCE_PER_QUESTION = 0.15
    MAX_BUILD_PROGRESS = 100

    def __init__(self, llm, rng: Optional[random.Random] = None):
        self.llm = llm
        self.rng = rng or random.Random()

    @classmethod
    def progress_for(cls, open_questions: int) -> float:
        return max(cls.MIN_PROGRESS, cls.BASE_PROGRESS - open_questions * cls.PROGRESS_PENALTY_PER_QUESTION)

    @classmethod
    def bug_probability(cls, open_questions: int) -> float:
        # Uncapped: seven or more open questions always produce a draw below it
        return open_questions * cls.BUG_CHANCE_PER_QUESTION

    async def run(self, state: SimulationState) -> None:
        game = state.game
        if len(state.quanta) == 0 or game.game_released:
            state.set_activity(self.NAME, "Idle.")
            return

        game.budget -= game.weekly_spend

        open_questions = state.questions.open_questions()
        progress = self.progress_for(len(open_questions))
        game.build_progress = min(self.MAX_BUILD_PROGRESS, game.build_progress + progress)
        activity = f"+{progress:.1f}% progress."

        if open_questions and self.rng.random() < self.bug_probability(len(open_questions)):
            blamed = self.rng.choice(open_questions)
            bug_text = await self.llm.generate(
                self.SYSTEM_PROMPT, f'The unresolved question is: "{blamed.text}"'
            )
            if not is_fallback(bug_text):
                game.bugs += 1
                state.bug_reports.append(BugReport(
                    text=bug_text,
                    week=game.current_week,
                    source_question_id=blamed.id,
                ))
                activity = "A new bug was reported!"
                logger.info("Bug filed against question %s", blamed.id)

        state.set_activity(self.NAME, activity)

        if game.build_progress >= self.MAX_BUILD_PROGRESS:
            release_game(state)
