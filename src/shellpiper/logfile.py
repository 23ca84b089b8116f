import logging
from datetime import datetime
from pathlib import Path
from typing import IO, Optional, Union

from .ansi import strip_ansi
from .callbacks import WorkflowCallback
from .exceptions import ResourceError
from .types import ExecutionResult, Step, WorkflowDefinition

logger = logging.getLogger(__name__)

# Same layout as date(1) in the C locale.
TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Z %Y"


def format_timestamp(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now()
    return moment.astimezone().strftime(TIMESTAMP_FORMAT)


class WorkflowLog(WorkflowCallback):
    """Writes a plain-text record of every command and its sanitized output.

    The file is truncated when the run starts, then only appended to. Lines
    captured from a command are written in the order they were produced, with
    terminal control sequences removed.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._handle: Optional[IO[str]] = None

    def _write(self, text: str) -> None:
        if self._handle is None:
            raise RuntimeError("WorkflowLog used before before_run()")
        try:
            self._handle.write(text)
            self._handle.flush()
        except OSError as e:
            raise ResourceError(self.path, e) from e

    async def before_run(self, definition: WorkflowDefinition) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._handle = self.path.open("w", encoding="utf-8")
        except OSError as e:
            raise ResourceError(self.path, e) from e
        logger.debug("Opened workflow log", extra={"path": str(self.path)})
        self._write(f"=== {definition.name} Started at {format_timestamp()} ===\n")

    async def before_step(self, step: Step) -> None:
        self._write(f"\n--- Executing: {step.command} ---\n")

    async def after_step(self, step: Step, result: ExecutionResult) -> None:
        if result.output:
            self._write("".join(f"{strip_ansi(line)}\n" for line in result.output))

    async def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
