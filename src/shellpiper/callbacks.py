import logging
import time
from typing import Dict

from shellpiper.types import ExecutionResult, Step, WorkflowDefinition

logger = logging.getLogger(__name__)


class WorkflowCallback:
    """Interface for workflow lifecycle callbacks."""
    async def before_run(self, definition: WorkflowDefinition) -> None:
        pass

    async def before_step(self, step: Step) -> None:
        pass

    async def after_step(self, step: Step, result: ExecutionResult) -> None:
        pass


class TimingCallback(WorkflowCallback):
    """Callback that tracks wall-clock time for each step."""
    def __init__(self) -> None:
        self.step_timings: Dict[int, float] = {}
        self._current_start: float = 0.0

    async def before_step(self, step: Step) -> None:
        self._current_start = time.monotonic()
        logger.info("Starting step", extra={"step": step.index, "command": step.command})

    async def after_step(self, step: Step, result: ExecutionResult) -> None:
        duration = time.monotonic() - self._current_start
        self.step_timings[step.index] = duration
        logger.info(
            "Finished step",
            extra={"step": step.index, "duration": duration, "exit_code": result.exit_code},
        )
