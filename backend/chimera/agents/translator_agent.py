# backend/chimera/agents/translator_agent.py

import logging
from typing import List

from chimera.engine.commands import AnswerCommand
from chimera.engine.quantum_templates import QUANTUM_TEMPLATES
from chimera.engine.state import Quantum, SimulationState, week_label

logger = logging.getLogger(__name__)


class TranslatorAgent:
    """Turns player commands into design facts by keyword matching. No LLM involved."""

    NAME = "translator"

    @staticmethod
    def parse(command_text: str, current_week: int) -> List[Quantum]:
        """Build (but do not store) the quanta a command declares."""
        lowered = command_text.lower()
        created_at = week_label(current_week)
        return [
            Quantum(
                quantum_type=quantum_type,
                data=dict(payload),
                created_at=created_at,
                declaration_source=command_text,
            )
            for keyword, quantum_type, payload in QUANTUM_TEMPLATES
            if keyword in lowered
        ]

    @classmethod
    def translate(cls, state: SimulationState, command_text: str) -> bool:
        """Append any declared quanta to the core. Returns True if something was created."""
        state.set_activity(cls.NAME, f'Parsing: "{command_text[:30]}..."')

        new_quanta = cls.parse(command_text, state.game.current_week)
        for quantum in new_quanta:
            state.quanta.append(quantum)

        if new_quanta:
            state.set_activity(cls.NAME, f"Created {len(new_quanta)} new quanta.")
            logger.info("Translator created %d quanta: %s",
                        len(new_quanta), [q.describe() for q in new_quanta])
            return True

        state.set_activity(cls.NAME, "No new quanta defined from input.")
        return False

    @classmethod
    def resolve_answer(cls, state: SimulationState, command: AnswerCommand) -> bool:
        """
        Close the referenced question if it is still open, then parse the
        whole answer for new facts either way.
        """
        question_id = command.question_id
        if question_id and state.questions.mark_answered(question_id):
            cls.translate(state, command.text)
            state.set_activity(cls.NAME, f"Answered question {question_id}.")
            logger.info("Question %s answered", question_id)
            return True

        cls.translate(state, command.text)
        return False
