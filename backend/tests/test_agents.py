"""
Per-agent behaviour: Inquisitor, Producer, Marketing.
"""

import asyncio
import logging

import pytest

from chimera.agents.inquisitor_agent import InquisitorAgent
from chimera.agents.marketing_agent import MarketingAgent
from chimera.agents.producer_agent import ProducerAgent
from chimera.agents.translator_agent import TranslatorAgent
from chimera.engine.state import Question, SimulationState

from helpers import OfflineLLM, ScriptedLLM, ScriptedRandom


def _declare(state, text):
    TranslatorAgent.translate(state, text)


def _open_questions(state, n):
    state.questions.extend([
        Question(text=f"Open question number {i}?", source_quantum_id="q-x") for i in range(n)
    ])


# ---------------------------------------------------------------------------
# Inquisitor
# ---------------------------------------------------------------------------

def test_inquisitor_asks_about_each_new_fact_in_order():
    state = SimulationState()
    _declare(state, "/declare an rpg with stealth")
    llm = ScriptedLLM(["How deep is the skill tree?", "What happens when spotted?"])

    asyncio.run(InquisitorAgent(llm).run(state))

    assert [ctx for _, ctx in llm.calls] == ["[Genre] Action RPG", "[MechanicPillar] Stealth"]
    questions = list(state.questions)
    quanta = state.quanta.all()
    assert [q.source_quantum_id for q in questions] == [quanta[0].quantum_id, quanta[1].quantum_id]
    assert all(q.is_open and q.id.startswith("uq-") for q in questions)
    assert state.game.last_agent_activity["inquisitor"] == "Generated 2 new question(s)."


def test_inquisitor_rejects_short_and_fallback_replies():
    state = SimulationState()
    _declare(state, "/declare rpg stealth cyberpunk")
    llm = ScriptedLLM(["Too short", "Fallback: offline for now", "Exactly 10"])

    asyncio.run(InquisitorAgent(llm).run(state))

    assert len(llm.calls) == 3
    assert len(state.questions) == 0
    assert state.game.last_agent_activity["inquisitor"] == "Analysis complete. No new questions."


def test_inquisitor_skips_facts_from_answers():
    state = SimulationState()
    _declare(state, "/answer uq-123 the protagonist is quiet")
    llm = ScriptedLLM()

    asyncio.run(InquisitorAgent(llm).run(state))

    assert llm.calls == []
    assert len(state.questions) == 0


def test_inquisitor_without_new_facts():
    state = SimulationState()
    _declare(state, "/declare rpg")
    state.game.current_week = 2
    llm = ScriptedLLM()

    asyncio.run(InquisitorAgent(llm).run(state))

    assert llm.calls == []
    assert state.game.last_agent_activity["inquisitor"] == "No new facts to analyze."


# ---------------------------------------------------------------------------
# Producer
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("open_count, expected", [(0, 5.0), (1, 4.5), (4, 3.0), (9, 0.5), (20, 0.5)])
def test_progress_rate(open_count, expected):
    assert ProducerAgent.progress_for(open_count) == pytest.approx(expected)


def test_producer_idle_before_any_design():
    state = SimulationState()
    asyncio.run(ProducerAgent(ScriptedLLM(), rng=ScriptedRandom()).run(state))

    assert state.game.budget == 1_000_000
    assert state.game.build_progress == 0
    assert state.game.last_agent_activity["producer"] == "Idle."


def test_producer_with_no_open_questions_makes_full_progress_without_draw():
    state = SimulationState()
    _declare(state, "/declare rpg")
    rng = ScriptedRandom()

    asyncio.run(ProducerAgent(ScriptedLLM(), rng=rng).run(state))

    assert rng.draw_count == 0
    assert state.game.build_progress == pytest.approx(5.0)
    assert state.game.budget == 1_000_000 - 5000
    assert state.game.last_agent_activity["producer"] == "+5.0% progress."


def test_producer_budget_may_go_negative():
    state = SimulationState()
    _declare(state, "/declare rpg")
    state.game.budget = 1000

    asyncio.run(ProducerAgent(ScriptedLLM(), rng=ScriptedRandom()).run(state))

    assert state.game.budget == -4000


def test_producer_files_bug_when_draw_is_below_threshold():
    state = SimulationState()
    _declare(state, "/declare rpg")
    _open_questions(state, 2)  # probability 0.3
    llm = ScriptedLLM(["Bug #404: Guards forget how doors work."])

    asyncio.run(ProducerAgent(llm, rng=ScriptedRandom([0.29])).run(state))

    blamed = list(state.questions)[0]
    assert state.game.bugs == 1
    report = state.bug_reports.recent()[0]
    assert report.source_question_id == blamed.id
    assert report.week == 1
    assert llm.calls[0][1] == f'The unresolved question is: "{blamed.text}"'
    assert state.game.build_progress == pytest.approx(4.0)
    assert state.game.last_agent_activity["producer"] == "A new bug was reported!"


def test_producer_no_bug_when_draw_meets_threshold():
    state = SimulationState()
    _declare(state, "/declare rpg")
    _open_questions(state, 2)
    llm = ScriptedLLM()

    asyncio.run(ProducerAgent(llm, rng=ScriptedRandom([0.3])).run(state))

    assert llm.calls == []
    assert state.game.bugs == 0


def test_producer_uncapped_probability_always_fires_at_seven_questions():
    assert ProducerAgent.bug_probability(7) > 1.0
    state = SimulationState()
    _declare(state, "/declare rpg")
    _open_questions(state, 7)

    asyncio.run(ProducerAgent(ScriptedLLM(["Bug #123: Everything is on fire."]),
                              rng=ScriptedRandom([0.999])).run(state))

    assert state.game.bugs == 1


def test_producer_discards_fallback_bug_text():
    state = SimulationState()
    _declare(state, "/declare rpg")
    _open_questions(state, 3)

    asyncio.run(ProducerAgent(OfflineLLM(), rng=ScriptedRandom([0.0])).run(state))

    assert state.game.bugs == 0
    assert len(state.bug_reports) == 0
    assert state.game.last_agent_activity["producer"] == "+3.5% progress."


def test_producer_releases_at_cap():
    state = SimulationState()
    _declare(state, "/declare rpg")
    state.game.build_progress = 97.0
    state.game.design_completeness = 100

    asyncio.run(ProducerAgent(ScriptedLLM(), rng=ScriptedRandom()).run(state))

    assert state.game.build_progress == 100
    assert state.game.game_released is True
    assert state.game.final_score == pytest.approx(100 * 0.4 + 0 + 100 * 0.3)


# ---------------------------------------------------------------------------
# Marketing
# ---------------------------------------------------------------------------

def test_marketing_inactive_only_plans():
    state = SimulationState()
    _declare(state, "/declare stealth")
    llm = ScriptedLLM()

    asyncio.run(MarketingAgent(llm).run(state))

    assert llm.calls == []
    assert state.game.market_hype == 0
    assert state.game.weekly_spend == 5000
    assert state.game.last_agent_activity["marketing"] == "Planning..."


def test_marketing_promotes_first_promotable_fact():
    state = SimulationState()
    state.game.marketing_active = True
    _declare(state, "/declare an rpg art style with ghostwire and a protagonist")
    llm = ScriptedLLM(["Meet Unit 734! #ProjectChimera"])

    asyncio.run(MarketingAgent(llm).run(state))

    # Genre and ArtStyle are not promotable; Character precedes Ability in creation order
    assert llm.calls[0][1] == "The new game feature is a Character called 'Unit 734'."
    assert state.game.last_agent_activity["marketing"] == "Meet Unit 734! #ProjectChimera"
    assert state.game.market_hype == pytest.approx(4 / 2)
    assert state.game.weekly_spend == 7000


def test_marketing_without_feature_still_builds_hype():
    state = SimulationState()
    state.game.marketing_active = True
    _declare(state, "/declare rpg gameplay loop")
    state.game.last_agent_activity["marketing"] = "previous post"
    llm = ScriptedLLM()

    asyncio.run(MarketingAgent(llm).run(state))

    assert llm.calls == []
    assert state.game.last_agent_activity["marketing"] == "previous post"
    assert state.game.market_hype == pytest.approx(1.0)
    assert state.game.weekly_spend == 7000


def test_marketing_creative_block_on_fallback_and_hype_cap():
    state = SimulationState()
    state.game.marketing_active = True
    state.game.market_hype = 99.8
    _declare(state, "/declare cyberpunk")

    asyncio.run(MarketingAgent(OfflineLLM()).run(state))

    assert state.game.last_agent_activity["marketing"] == "Creative block! We'll post something next week."
    assert state.game.market_hype == 100


def test_marketing_logs_promoted_feature(caplog):
    state = SimulationState()
    state.game.marketing_active = True
    _declare(state, "/declare ghostwire")

    with caplog.at_level(logging.INFO, logger="chimera.agents.marketing_agent"):
        asyncio.run(MarketingAgent(ScriptedLLM(["Ghostwire is live! #ProjectChimera"])).run(state))

    assert "Marketing promoted [Ability] Ghostwire" in caplog.text


def test_marketing_logs_creative_block(caplog):
    state = SimulationState()
    state.game.marketing_active = True
    _declare(state, "/declare stealth")

    with caplog.at_level(logging.INFO, logger="chimera.agents.marketing_agent"):
        asyncio.run(MarketingAgent(OfflineLLM()).run(state))

    assert "creative block promoting [MechanicPillar] Stealth" in caplog.text
