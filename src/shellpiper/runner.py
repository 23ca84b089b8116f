import logging
from dataclasses import dataclass
from typing import IO, Optional

from .callbacks import WorkflowCallback
from .exceptions import StepFailedError
from .executor import StepExecutor
from .logfile import WorkflowLog
from .render import ProgressRenderer
from .types import ExecutionResult, RunState, Step, WorkflowDefinition

logger = logging.getLogger(__name__)


@dataclass
class RunnerConfig:
    """Configuration for workflow execution."""

    poll_interval: float = 0.1
    tail_lines: int = 10
    shell: Optional[str] = None


class WorkflowRunner:
    """Runs the steps of a workflow one after another, stopping at the first failure."""

    def __init__(
        self,
        definition: WorkflowDefinition,
        config: Optional[RunnerConfig] = None,
        callbacks: Optional[list[WorkflowCallback]] = None,
        renderer: Optional[ProgressRenderer] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        self.definition = definition
        self.config = config or RunnerConfig()
        self.renderer = renderer or ProgressRenderer(stream=stream)
        self.executor = StepExecutor(
            self.renderer,
            poll_interval=self.config.poll_interval,
            shell=self.config.shell,
        )
        self.callbacks: list[WorkflowCallback] = []
        if definition.log_target is not None:
            self.callbacks.append(WorkflowLog(definition.log_target))
        self.callbacks.extend(callbacks or [])
        self.state = RunState.NOT_STARTED
        self.current_index = 0

    def add_callback(self, callback: WorkflowCallback) -> None:
        self.callbacks.append(callback)

    def _draw(self, current_index: int, failed: bool = False) -> None:
        self.renderer.draw(self.definition.name, current_index, self.definition.steps, failed)

    def _write(self, text: str) -> None:
        self.renderer.stream.write(text)
        self.renderer.stream.flush()

    async def _run_step(self, step: Step) -> ExecutionResult:
        for callback in self.callbacks:
            await callback.before_step(step)

        result = await self.executor.execute(step)

        for callback in self.callbacks:
            await callback.after_step(step, result)

        return result

    async def run(self) -> None:
        definition = self.definition
        try:
            for callback in self.callbacks:
                await callback.before_run(definition)

            self.state = RunState.RUNNING
            for step in definition.steps:
                self.current_index = step.index
                self._draw(step.index)
                logger.info("Starting step", extra={"step": step.index, "description": step.description})

                result = await self._run_step(step)

                if not result.succeeded:
                    self.state = RunState.FAILED
                    logger.warning(
                        "Step failed",
                        extra={"step": step.index, "exit_code": result.exit_code},
                    )
                    self._draw(step.index, failed=True)
                    self._write(
                        self.renderer.failure_report(step, result, definition.log_target, self.config.tail_lines)
                    )
                    raise StepFailedError(step, result.exit_code)

                logger.info("Completed step", extra={"step": step.index})

            self.current_index = len(definition.steps) + 1
            self.state = RunState.SUCCEEDED
            self._draw(self.current_index)
            self._write(self.renderer.success_report(definition.name, definition.log_target))
        finally:
            for callback in self.callbacks:
                if hasattr(callback, "close") and callable(callback.close):
                    await callback.close()
