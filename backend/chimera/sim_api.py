# backend/chimera/sim_api.py

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from chimera.config import CONFIG
from chimera.engine.runner import SimulationRunner
from chimera.engine.turn_engine import TurnEngine

router = APIRouter()

# One simulation per process, like one page session
engine = TurnEngine(project_name=CONFIG["PROJECT_NAME"])
runner = SimulationRunner(engine)


def reset_simulation(llm=None, rng=None):
    """Start a fresh run (the page-refresh equivalent). Returns the new engine."""
    global engine, runner
    if runner.is_running:
        runner.toggle()
    engine = TurnEngine(llm=llm, rng=rng, project_name=CONFIG["PROJECT_NAME"])
    runner = SimulationRunner(engine)
    return engine


# --------------------------------------------------------------------
# Request models
# --------------------------------------------------------------------
class CommandInput(BaseModel):
    command: str

class SpeedInput(BaseModel):
    seconds: float


def build_snapshot() -> dict:
    snapshot = engine.state.snapshot()
    snapshot["command_hint"] = runner.command_hint()
    snapshot["auto_play"] = {
        "running": runner.is_running,
        "interval_seconds": runner.interval_seconds,
    }
    return snapshot


# --------------------------------------------------------------------
# /sim/state — read-only snapshot
# --------------------------------------------------------------------
@router.get("/state")
async def sim_state():
    return build_snapshot()


# --------------------------------------------------------------------
# /sim/command — queue a command; advance immediately when not auto-playing
# --------------------------------------------------------------------
@router.post("/command")
async def sim_command(payload: CommandInput):
    if engine.state.game.game_released:
        raise HTTPException(409, "The game has been released. Reset to start a new project.")

    runner.submit_command(payload.command)
    advanced = False
    if not runner.is_running:
        advanced = await engine.advance_week()

    return {"status": "ok", "advanced": advanced, "state": build_snapshot()}


# --------------------------------------------------------------------
# /sim/advance — one week
# --------------------------------------------------------------------
@router.post("/advance")
async def sim_advance():
    if engine.state.game.game_released:
        return {"status": "released", "state": build_snapshot()}

    advanced = await engine.advance_week()
    return {"status": "ok" if advanced else "busy", "state": build_snapshot()}


# --------------------------------------------------------------------
# /sim/toggle — start / stop automatic progression
# --------------------------------------------------------------------
@router.post("/toggle")
async def sim_toggle():
    running = runner.toggle()
    return {"status": "ok", "running": running}


# --------------------------------------------------------------------
# /sim/speed — seconds between automatic turns
# --------------------------------------------------------------------
@router.post("/speed")
async def sim_speed(payload: SpeedInput):
    try:
        runner.set_interval(payload.seconds)
    except ValueError as e:
        raise HTTPException(400, str(e))
    return {"status": "ok", "interval_seconds": runner.interval_seconds}


# --------------------------------------------------------------------
# /sim/reset — fresh project
# --------------------------------------------------------------------
@router.post("/reset")
async def sim_reset():
    reset_simulation()
    return {"status": "ok", "state": build_snapshot()}
