# main.py
import asyncio
import logging
import sys
from typing import Optional, Sequence

from shellpiper.ansi import Colors
from shellpiper.arguments import parse_arguments
from shellpiper.callbacks import TimingCallback
from shellpiper.exceptions import ConfigurationError, ResourceError, StepFailedError
from shellpiper.logging_utils import configure_logging
from shellpiper.runner import WorkflowRunner

logger = logging.getLogger(__name__)


def _error(message: str) -> None:
    sys.stderr.write(f"{Colors.RED}Error: {message}{Colors.RESET}\n")


async def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        definition = parse_arguments(argv)
    except ConfigurationError as e:
        _error(str(e))
        sys.stderr.write("Use --help for usage information\n")
        return 1
    if definition is None:
        return 0

    runner = WorkflowRunner(definition, callbacks=[TimingCallback()])
    try:
        await runner.run()
    except StepFailedError as e:
        logger.info("Workflow failed", extra={"step": e.step_index, "exit_code": e.exit_code})
        return 1
    except ResourceError as e:
        _error(str(e))
        return 1
    return 0


def run() -> None:
    """Console script entry point for ``run-workflow``."""
    configure_logging()
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        sys.stderr.write("\n")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    run()
