# backend/chimera/agents/marketing_agent.py

import logging

from chimera.engine.state import SimulationState
from chimera.llm_client import is_fallback

logger = logging.getLogger(__name__)


class MarketingAgent:
    """Hype-focused marketer. Dormant until the engine activates marketing."""

    NAME = "marketing"

    SYSTEM_PROMPT = (
        "You are a hype-focused marketing agent. Write a short, exciting social media post "
        "(140 characters max) about the latest game feature. "
        "Include a relevant hashtag like #ProjectChimera."
    )

    PROMOTABLE_TYPES = ("Ability", "Character", "MechanicPillar", "Setting")
    SPEND_INCREMENT = 2000
    MAX_HYPE = 100

    def __init__(self, llm):
        self.llm = llm

    def pick_feature(self, state: SimulationState):
        """First promotable quantum declared this week, in creation order."""
        for quantum in state.quanta.created_in(state.game.current_week):
            if quantum.quantum_type in self.PROMOTABLE_TYPES:
                return quantum
        return None

    async def run(self, state: SimulationState) -> None:
        game = state.game
        if not game.marketing_active or game.game_released:
            state.set_activity(self.NAME, "Planning...")
            return

        feature = self.pick_feature(state)
        if feature is not None:
            description = f"The new game feature is a {feature.quantum_type} called '{feature.label}'."
            post = await self.llm.generate(self.SYSTEM_PROMPT, description)
            if is_fallback(post):
                logger.info("Marketing hit a creative block promoting %s", feature.describe())
                state.set_activity(self.NAME, "Creative block! We'll post something next week.")
            else:
                logger.info("Marketing promoted %s", feature.describe())
                state.set_activity(self.NAME, post)

        game.market_hype = min(self.MAX_HYPE, game.market_hype + len(state.quanta) / 2)
        game.weekly_spend += self.SPEND_INCREMENT
        logger.info("Hype now %.1f, weekly spend %s", game.market_hype, game.weekly_spend)
