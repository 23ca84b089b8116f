from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from .types import Step


class ShellPiperError(Exception):
    """Base exception class for ShellPiper errors."""


class ConfigurationError(ShellPiperError):
    """Raised when the workflow arguments cannot be turned into a definition."""


class MalformedStep(ConfigurationError):
    """Raised when a step option is not followed by a description and a command."""

    def __init__(self, values: Optional[list[str]] = None) -> None:
        msg = "--step requires both description and command"
        if values:
            msg += f" (got {len(values)} value{'s' if len(values) != 1 else ''})"
        super().__init__(msg)


class UnknownOption(ConfigurationError):
    """Raised for options the parser does not recognize."""

    def __init__(self, option: str) -> None:
        self.option = option
        super().__init__(f"Unknown parameter {option}")


class NoStepsProvided(ConfigurationError):
    """Raised when a workflow would have no steps to run."""

    def __init__(self) -> None:
        super().__init__("At least one --step is required")


class StepFailedError(ShellPiperError):
    """Raised when a step's command exits with a nonzero status."""

    def __init__(self, step: "Step", exit_code: int) -> None:
        self.step_index = step.index
        self.command = step.command
        self.exit_code = exit_code
        super().__init__(f"Step {step.index} ('{step.description}') failed with exit code {exit_code}")


class ResourceError(ShellPiperError):
    """Raised when the log destination cannot be created or written."""

    def __init__(self, path: Union[str, Path], cause: Exception) -> None:
        self.path = Path(path)
        super().__init__(f"Cannot write log file '{path}': {cause}")
