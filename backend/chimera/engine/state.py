# backend/chimera/engine/state.py
# -------------------------------------------------------------
#  Simulation state: fact store, ledgers and the game record
# -------------------------------------------------------------

import uuid
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Optional, Any


# Game tuning constants
STARTING_BUDGET = 1_000_000
STARTING_WEEKLY_SPEND = 5000

DEFAULT_COMMAND = (
    "/declare 'Project Chimera' is a third-person action RPG with stealth elements, "
    "set in a cyberpunk fantasy world."
)

QUANTUM_TYPES = (
    "Genre",
    "MechanicPillar",
    "Setting",
    "Character",
    "Ability",
    "ArtStyle",
    "GameplayLoop",
)

STATUS_ACTIVE = "Active"
STATUS_OPEN = "Open"
STATUS_ANSWERED = "Answered"


def generate_id(prefix: str = "q") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:9]}"


def week_label(week: int) -> str:
    return f"Week {week}"


# ============================================================
#  RECORDS
# ============================================================
@dataclass
class Quantum:
    quantum_type: str
    data: Dict[str, str]
    created_at: str
    declaration_source: str
    quantum_id: str = field(default_factory=lambda: generate_id("q"))
    version: int = 1
    status: str = STATUS_ACTIVE

    @property
    def label(self) -> str:
        """Name or description, whichever the payload carries."""
        return self.data.get("name") or self.data.get("description") or ""

    def describe(self) -> str:
        return f"[{self.quantum_type}] {self.label}"


@dataclass
class Question:
    text: str
    source_quantum_id: str
    id: str = field(default_factory=lambda: generate_id("uq"))
    status: str = STATUS_OPEN

    @property
    def is_open(self) -> bool:
        return self.status == STATUS_OPEN


@dataclass(frozen=True)
class BugReport:
    text: str
    week: int
    source_question_id: str
    id: str = field(default_factory=lambda: generate_id("bug"))


# ============================================================
#  COLLECTIONS
# ============================================================
class QuantumCore:
    """Append-only store of design facts for one run."""

    def __init__(self):
        self._quanta: List[Quantum] = []

    def __len__(self) -> int:
        return len(self._quanta)

    def __iter__(self):
        return iter(self._quanta)

    def append(self, quantum: Quantum) -> None:
        self._quanta.append(quantum)

    def all(self) -> List[Quantum]:
        return list(self._quanta)

    def created_in(self, week: int) -> List[Quantum]:
        label = week_label(week)
        return [q for q in self._quanta if q.created_at == label]

    def get(self, quantum_id: str) -> Optional[Quantum]:
        for q in self._quanta:
            if q.quantum_id == quantum_id:
                return q
        return None


class QuestionLedger:
    def __init__(self):
        self._questions: List[Question] = []

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)

    def extend(self, questions: List[Question]) -> None:
        self._questions.extend(questions)

    def get(self, question_id: str) -> Optional[Question]:
        for q in self._questions:
            if q.id == question_id:
                return q
        return None

    def open_questions(self) -> List[Question]:
        return [q for q in self._questions if q.is_open]

    def open_count(self) -> int:
        return len(self.open_questions())

    def mark_answered(self, question_id: str) -> bool:
        """Flip an open question to Answered. Returns False for unknown or closed ids."""
        question = self.get(question_id)
        if question is None or not question.is_open:
            return False
        question.status = STATUS_ANSWERED
        return True


class BugLedger:
    def __init__(self):
        self._reports: List[BugReport] = []

    def __len__(self) -> int:
        return len(self._reports)

    def __iter__(self):
        return iter(self._reports)

    def append(self, report: BugReport) -> None:
        self._reports.append(report)

    def recent(self, limit: int = 5) -> List[BugReport]:
        return self._reports[-limit:] if limit > 0 else []


# ============================================================
#  GAME STATE
# ============================================================
def _default_activity() -> Dict[str, str]:
    return {
        "translator": "Awaiting input.",
        "inquisitor": "Idle.",
        "producer": "Awaiting project start.",
        "marketing": "Planning phase.",
    }


@dataclass
class GameState:
    project_name: str = "Project Chimera"
    current_week: int = 1
    budget: float = STARTING_BUDGET
    weekly_spend: float = STARTING_WEEKLY_SPEND
    design_completeness: float = 0.0
    build_progress: float = 0.0
    bugs: int = 0
    market_hype: float = 0.0
    marketing_active: bool = False
    game_released: bool = False
    final_score: float = 0.0
    command_queue: List[str] = field(default_factory=lambda: [DEFAULT_COMMAND])
    last_agent_activity: Dict[str, str] = field(default_factory=_default_activity)

    @property
    def week_label(self) -> str:
        return week_label(self.current_week)


class SimulationState:
    """
    Everything one run mutates. Owned by a TurnEngine and handed to each
    agent for the duration of a turn.
    """

    def __init__(self, game: Optional[GameState] = None):
        self.game = game or GameState()
        self.quanta = QuantumCore()
        self.questions = QuestionLedger()
        self.bug_reports = BugLedger()
        self.is_waiting_for_agents = False
        self.agent_status_text = "Idle"

    def set_activity(self, agent: str, text: str) -> None:
        self.game.last_agent_activity[agent] = text

    def recompute_design_completeness(self) -> float:
        quanta = len(self.quanta)
        total = quanta + self.questions.open_count()
        if total > 0:
            value = quanta / total * 100
        else:
            value = 100.0 if quanta > 0 else 0.0
        self.game.design_completeness = value
        return value

    def snapshot(self, recent_bugs: int = 5) -> Dict[str, Any]:
        """Read-only copy for the presentation layer."""
        game = asdict(self.game)
        return {
            "game": game,
            "quanta": [asdict(q) for q in self.quanta],
            "open_questions": [asdict(q) for q in self.questions.open_questions()],
            "bug_reports": [asdict(b) for b in self.bug_reports.recent(recent_bugs)],
            "is_waiting_for_agents": self.is_waiting_for_agents,
            "agent_status_text": self.agent_status_text,
        }
