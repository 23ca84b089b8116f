from .arguments import WorkflowArgumentParser, parse_arguments
from .callbacks import TimingCallback, WorkflowCallback
from .exceptions import (
    ConfigurationError,
    MalformedStep,
    NoStepsProvided,
    ResourceError,
    ShellPiperError,
    StepFailedError,
    UnknownOption,
)
from .executor import CapturedCommand, StepExecutor
from .logfile import WorkflowLog
from .render import DEFAULT_STYLES, ProgressRenderer, StatusStyle
from .runner import RunnerConfig, WorkflowRunner
from .types import ExecutionResult, RunState, Step, StepStatus, WorkflowDefinition

__all__ = [
    "CapturedCommand",
    "ConfigurationError",
    "DEFAULT_STYLES",
    "ExecutionResult",
    "MalformedStep",
    "NoStepsProvided",
    "ProgressRenderer",
    "ResourceError",
    "RunState",
    "RunnerConfig",
    "ShellPiperError",
    "StatusStyle",
    "Step",
    "StepExecutor",
    "StepFailedError",
    "StepStatus",
    "TimingCallback",
    "UnknownOption",
    "WorkflowArgumentParser",
    "WorkflowCallback",
    "WorkflowDefinition",
    "WorkflowLog",
    "WorkflowRunner",
    "parse_arguments",
]
