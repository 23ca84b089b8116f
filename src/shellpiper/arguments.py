"""Turns ``run-workflow`` command line arguments into a :class:`WorkflowDefinition`."""

import argparse
import os
import sys
from pathlib import Path
from typing import IO, Any, NoReturn, Optional, Sequence

from .ansi import Colors
from .exceptions import ConfigurationError, MalformedStep, UnknownOption
from .types import DEFAULT_WORKFLOW_NAME, WorkflowDefinition

PROG = "run-workflow"
# Logging to the null device is the same as not logging at all.
DISCARD_LOG = Path(os.devnull)

HELP_TEXT = f"""{Colors.BLUE}🚀 {PROG} - Execute a sequence of commands with live progress display{Colors.RESET}

{Colors.YELLOW}USAGE:{Colors.RESET}
  {PROG} [OPTIONS] --step "description" "command" [--step "desc2" "cmd2" ...]

{Colors.YELLOW}OPTIONS:{Colors.RESET}
  --workflow-name, -w "Name"     Display name for the workflow (default: "{DEFAULT_WORKFLOW_NAME}")
  --log-file, -l "/path/log"     Log file path (default: no logging)
  --step, -s "desc" "command"    Add a step with description and shell command
  --help, -h                     Show this help message

{Colors.YELLOW}EXAMPLES:{Colors.RESET}
  # Simple workflow without logging:
  {PROG} --workflow-name "Quick Test" \\
    --step "Running tests" "pnpm test" \\
    --step "Linting code" "pnpm lint"

  # Full workflow with logging:
  {PROG} --workflow-name "Deploy" \\
    --log-file "$HOME/deploy.log" \\
    --step "Building" "pnpm build" \\
    --step "Testing" "pnpm test" \\
    --step "Deploying" "pnpm deploy"

{Colors.YELLOW}FEATURES:{Colors.RESET}
  • Live progress indicator with colored status
  • Real-time output display of current command
  • Clean log files with ANSI codes stripped
  • Automatic failure detection and reporting
  • Steps and commands are paired as tuples
"""


class _StepAction(argparse.Action):
    """Collects one (description, command) pair per occurrence of --step."""

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: Any,
        option_string: Optional[str] = None,
    ) -> None:
        values = list(values or [])
        if len(values) < 2:
            raise MalformedStep(values)
        if len(values) > 2:
            raise UnknownOption(values[2])
        pairs = list(getattr(namespace, self.dest, None) or [])
        pairs.append((values[0], values[1]))
        setattr(namespace, self.dest, pairs)


class WorkflowArgumentParser(argparse.ArgumentParser):
    """Argument parser that raises instead of printing usage and exiting."""

    def error(self, message: str) -> NoReturn:
        raise ConfigurationError(message)


def build_parser() -> WorkflowArgumentParser:
    parser = WorkflowArgumentParser(prog=PROG, add_help=False, allow_abbrev=False)
    parser.add_argument("--workflow-name", "-w", dest="name", default=DEFAULT_WORKFLOW_NAME)
    parser.add_argument("--log-file", "-l", dest="log_file", type=Path, default=None)
    parser.add_argument("--step", "-s", dest="steps", nargs="*", action=_StepAction, default=[])
    parser.add_argument("--help", "-h", dest="help", action="store_true")
    return parser


def parse_arguments(
    argv: Optional[Sequence[str]] = None,
    stdout: Optional[IO[str]] = None,
) -> Optional[WorkflowDefinition]:
    """Parse ``argv`` into a workflow definition.

    Returns ``None`` when help was requested; the usage text has then already
    been written to ``stdout``.

    Raises:
        MalformedStep: a step option without both a description and a command
        UnknownOption: an option or stray value the parser does not recognize
        NoStepsProvided: no step option was given
        ConfigurationError: any other malformed option
    """
    args = list(sys.argv[1:] if argv is None else argv)
    namespace, extras = build_parser().parse_known_args(args)

    if namespace.help:
        (stdout or sys.stdout).write(HELP_TEXT)
        return None
    if extras:
        raise UnknownOption(extras[0])

    log_target = namespace.log_file
    if log_target == DISCARD_LOG:
        log_target = None
    return WorkflowDefinition.build(namespace.steps, name=namespace.name, log_target=log_target)
