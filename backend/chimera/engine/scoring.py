# backend/chimera/engine/scoring.py

import logging

from chimera.engine.state import SimulationState

logger = logging.getLogger(__name__)

DESIGN_WEIGHT = 0.4
HYPE_WEIGHT = 0.3
QUALITY_WEIGHT = 0.3
BUG_PENALTY = 2


def final_score(design_completeness: float, market_hype: float, bugs: int) -> float:
    quality = max(0, 100 - bugs * BUG_PENALTY)
    return design_completeness * DESIGN_WEIGHT + market_hype * HYPE_WEIGHT + quality * QUALITY_WEIGHT


def release_game(state: SimulationState) -> bool:
    """Mark the game released and freeze the score. Only the first call has any effect."""
    game = state.game
    if game.game_released:
        return False

    game.game_released = True
    game.final_score = final_score(game.design_completeness, game.market_hype, game.bugs)
    state.set_activity("producer", f"GAME RELEASED! Final Score: {game.final_score:.1f}")

    logger.info("🚀 %s released in week %d with score %.1f",
                game.project_name, game.current_week, game.final_score)
    return True
