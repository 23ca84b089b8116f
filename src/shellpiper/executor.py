import asyncio
import logging
import os
import tempfile
import time
from asyncio.subprocess import Process
from pathlib import Path
from typing import Any, List, Optional

from .ansi import CLEAR_LINE
from .render import ProgressRenderer
from .types import ExecutionResult, Step

logger = logging.getLogger(__name__)

# Block size used when scanning the capture sink backwards for the latest line.
TAIL_WINDOW = 4096


def _decode(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def _split_lines(text: str) -> List[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class CapturedCommand:
    """A shell command whose merged stdout/stderr goes to a temporary file.

    The sink is never attached to the terminal; callers poll ``latest_line()``
    and ``exited`` while the process runs. ``close()`` kills a process that is
    still running and removes the sink.
    """

    def __init__(self, command: str, shell: Optional[str] = None) -> None:
        self.command = command
        self.shell = shell
        self.sink_path: Optional[Path] = None
        self._process: Optional[Process] = None

    async def start(self) -> None:
        fd, name = tempfile.mkstemp(prefix="shellpiper-", suffix=".out")
        self.sink_path = Path(name)
        try:
            self._process = await asyncio.create_subprocess_shell(
                self.command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=fd,
                stderr=asyncio.subprocess.STDOUT,
                executable=self.shell,
            )
        finally:
            os.close(fd)
        logger.debug("Spawned command", extra={"pid": self._process.pid, "sink": name})

    @property
    def exited(self) -> bool:
        return self._process is not None and self._process.returncode is not None

    async def wait(self) -> int:
        if self._process is None:
            raise RuntimeError("Command has not been started")
        return await self._process.wait()

    def _read_tail(self) -> bytes:
        if self.sink_path is None:
            return b""
        try:
            with self.sink_path.open("rb") as sink:
                end = sink.seek(0, os.SEEK_END)
                data = b""
                # Stop once a newline precedes the last non-blank line, so the
                # chunk starts on a line boundary.
                while end > 0 and b"\n" not in data.rstrip():
                    start = max(0, end - TAIL_WINDOW)
                    sink.seek(start)
                    data = sink.read(end - start) + data
                    end = start
                return data
        except FileNotFoundError:
            return b""

    def latest_line(self) -> Optional[str]:
        """Return the most recent non-blank line written so far, if any."""
        for line in reversed(_split_lines(_decode(self._read_tail()))):
            if line.strip():
                return line
        return None

    def read_lines(self) -> List[str]:
        if self.sink_path is None:
            return []
        return _split_lines(_decode(self.sink_path.read_bytes()))

    async def close(self) -> None:
        try:
            if self._process is not None and self._process.returncode is None:
                try:
                    self._process.kill()
                except ProcessLookupError:
                    pass
                await self._process.wait()
        finally:
            if self.sink_path is not None:
                self.sink_path.unlink(missing_ok=True)

    async def __aenter__(self) -> "CapturedCommand":
        try:
            await self.start()
        except BaseException:
            await self.close()
            raise
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()


class StepExecutor:
    """Runs one step at a time, tailing its output onto a single terminal line."""

    def __init__(
        self,
        renderer: Optional[ProgressRenderer] = None,
        poll_interval: float = 0.1,
        shell: Optional[str] = None,
    ) -> None:
        self.renderer = renderer or ProgressRenderer()
        self.poll_interval = poll_interval
        self.shell = shell

    def _show(self, line: str) -> None:
        # A carriage return inside the line would overwrite the label.
        visible = line.rsplit("\r", 1)[-1] or line
        self.renderer.stream.write(self.renderer.live_line(visible))
        self.renderer.stream.flush()

    async def execute(self, step: Step) -> ExecutionResult:
        started = time.monotonic()
        async with CapturedCommand(step.command, shell=self.shell) as captured:
            displayed: Optional[str] = None
            while not captured.exited:
                line = captured.latest_line()
                if line is not None and line != displayed:
                    self._show(line)
                    displayed = line
                await asyncio.sleep(self.poll_interval)
            exit_code = await captured.wait()
            output = captured.read_lines()

        self.renderer.stream.write(CLEAR_LINE)
        self.renderer.stream.flush()
        result = ExecutionResult(exit_code=exit_code, output=output, duration=time.monotonic() - started)
        logger.debug(
            "Step command exited",
            extra={"step": step.index, "exit_code": exit_code, "lines": len(output)},
        )
        return result
