import sys
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Mapping, Optional, Sequence

from .ansi import CLEAR_LINE, CLEAR_SCREEN, Colors, strip_ansi
from .types import ExecutionResult, Step, StepStatus, step_status


@dataclass(frozen=True)
class StatusStyle:
    glyph: str
    color: str = ""


DEFAULT_STYLES: Mapping[StepStatus, StatusStyle] = {
    StepStatus.COMPLETED: StatusStyle("✅", Colors.GREEN),
    StepStatus.CURRENT: StatusStyle("⏳", Colors.YELLOW),
    StepStatus.PENDING: StatusStyle("⚪"),
    StepStatus.FAILED: StatusStyle("❌", Colors.RED),
}


class ProgressRenderer:
    """Full-screen progress view for a workflow.

    Every draw clears the terminal and repaints the whole view, so the output
    depends only on the arguments of that call.
    """

    def __init__(
        self,
        styles: Optional[Mapping[StepStatus, StatusStyle]] = None,
        stream: Optional[IO[str]] = None,
    ) -> None:
        self.styles = dict(DEFAULT_STYLES)
        if styles:
            self.styles.update(styles)
        self.stream = stream or sys.stdout

    def render_step(self, step: Step, status: StepStatus) -> str:
        style = self.styles[status]
        return f"{style.color}{style.glyph} Step {step.index}: {step.description}{Colors.RESET}"

    def render(self, name: str, current_index: int, steps: Sequence[Step], failed: bool = False) -> str:
        lines = ["", f"{Colors.BLUE}🚀 {name} Progress:{Colors.RESET}"]
        for step in steps:
            lines.append(self.render_step(step, step_status(step.index, current_index, failed)))
        lines.append("")
        return "\n".join(lines) + "\n"

    def draw(self, name: str, current_index: int, steps: Sequence[Step], failed: bool = False) -> None:
        self.stream.write(CLEAR_SCREEN + self.render(name, current_index, steps, failed))
        self.stream.flush()

    def live_line(self, text: str) -> str:
        return f"{CLEAR_LINE}{Colors.BLUE}Current: {Colors.RESET}{strip_ansi(text)}"

    def success_report(self, name: str, log_target: Optional[Path] = None) -> str:
        lines = [f"{Colors.GREEN}🎉 {name} completed successfully!{Colors.RESET}"]
        if log_target is not None:
            lines.append(self._log_pointer(log_target))
        return "\n".join(lines) + "\n"

    def failure_report(
        self,
        step: Step,
        result: ExecutionResult,
        log_target: Optional[Path] = None,
        tail_lines: int = 10,
    ) -> str:
        lines = [
            f"{Colors.RED}❌ Step {step.index} failed!{Colors.RESET}",
            f"{Colors.RED}Failed command: {step.command}{Colors.RESET}",
            "",
        ]
        context = result.tail(tail_lines)
        if context:
            lines.append(f"{Colors.RED}Error output:{Colors.RESET} (last {tail_lines} lines of captured logs)")
            lines.extend(context)
            lines.append("")
        if log_target is not None:
            lines.append(self._log_pointer(log_target))
        return "\n".join(lines) + "\n"

    @staticmethod
    def _log_pointer(log_target: Path) -> str:
        return f"{Colors.BLUE}📄 Full log available at: {log_target}{Colors.RESET}"
