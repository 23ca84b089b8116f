# types.py
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from .exceptions import NoStepsProvided

DEFAULT_WORKFLOW_NAME = "Workflow"


class StepStatus(Enum):
    PENDING = "pending"
    CURRENT = "current"
    COMPLETED = "completed"
    FAILED = "failed"


class RunState(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Step:
    description: str
    command: str
    index: int


@dataclass(frozen=True)
class WorkflowDefinition:
    """A named, ordered list of steps plus where to log their output."""

    steps: Tuple[Step, ...]
    name: str = DEFAULT_WORKFLOW_NAME
    log_target: Optional[Path] = None

    def __post_init__(self) -> None:
        if not self.steps:
            raise NoStepsProvided()

    @classmethod
    def build(
        cls,
        pairs: Iterable[Tuple[str, str]],
        name: str = DEFAULT_WORKFLOW_NAME,
        log_target: Optional[Path] = None,
    ) -> "WorkflowDefinition":
        steps = tuple(
            Step(description=description, command=command, index=position)
            for position, (description, command) in enumerate(pairs, start=1)
        )
        return cls(steps=steps, name=name, log_target=log_target)


@dataclass
class ExecutionResult:
    exit_code: int
    output: List[str] = field(default_factory=list)
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def tail(self, count: int) -> List[str]:
        if count <= 0:
            return []
        return self.output[-count:]


def step_status(step_index: int, current_index: int, failed: bool = False) -> StepStatus:
    """Derive the status of a step from the index of the step being run."""
    if step_index < current_index:
        return StepStatus.COMPLETED
    if step_index == current_index:
        return StepStatus.FAILED if failed else StepStatus.CURRENT
    return StepStatus.PENDING
