# backend/chimera/agents/inquisitor_agent.py

import logging

from chimera.engine.commands import ANSWER_PREFIX
from chimera.engine.state import Question, SimulationState
from chimera.llm_client import is_fallback

logger = logging.getLogger(__name__)


class InquisitorAgent:
    """
    Critical designer. Asks one probing question about every fact declared
    this week, except facts that arrived as part of an answer.
    """

    NAME = "inquisitor"

    SYSTEM_PROMPT = (
        "You are a critical game designer. Your job is to analyze a new design fact "
        "and generate one probing question to expose missing details. "
        "Your question must be a single line, and less than 10 words."
    )

    MIN_QUESTION_LENGTH = 10

    def __init__(self, llm):
        self.llm = llm

    async def run(self, state: SimulationState) -> None:
        recent = state.quanta.created_in(state.game.current_week)
        if not recent:
            state.set_activity(self.NAME, "No new facts to analyze.")
            return

        state.set_activity(self.NAME, f"Analyzing {len(recent)} new fact(s)...")

        new_questions = []
        # One request at a time so questions line up with quanta order
        for quantum in recent:
            if quantum.declaration_source.lower().startswith(ANSWER_PREFIX):
                continue

            text = await self.llm.generate(self.SYSTEM_PROMPT, quantum.describe())
            if is_fallback(text) or len(text) <= self.MIN_QUESTION_LENGTH:
                logger.info("Inquisitor discarded reply for %s", quantum.quantum_id)
                continue

            new_questions.append(Question(text=text, source_quantum_id=quantum.quantum_id))

        if new_questions:
            state.questions.extend(new_questions)
            state.set_activity(self.NAME, f"Generated {len(new_questions)} new question(s).")
        else:
            state.set_activity(self.NAME, "Analysis complete. No new questions.")
