from enum import Enum

from pydantic import BaseModel


class Outcome(str, Enum):
    SUCCESS = "success"
    HANDLE_CONSTRUCTION_FAILURE = "handle_construction_failure"
    INIT_FAILURE = "init_failure"
    APPLY_FAILURE = "apply_failure"


class InvocationState(str, Enum):
    """Lifecycle of one invocation. FAILED and DONE are terminal."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


class InvocationResult(BaseModel):
    """Result of one init -> apply run."""

    invocation_id: str
    work_dir: str
    exec_path: str
    outcome: Outcome
    state: InvocationState
    # State the invocation was in when it moved to FAILED
    failed_from: InvocationState | None = None
    steps: list[str] = []
    diagnostic: str | None = None
    exit_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.SUCCESS
