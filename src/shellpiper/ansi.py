"""Terminal escape sequences shared by the renderer, executor and log writer."""

import re


class Colors:
    """ANSI color codes for terminal output formatting."""
    BLUE = '\033[1;34m'
    GREEN = '\033[1;32m'
    YELLOW = '\033[1;33m'
    RED = '\033[1;31m'
    RESET = '\033[0m'


CLEAR_SCREEN = '\033[H\033[2J\033[3J'
# Column 1, then erase to end of line.
CLEAR_LINE = '\033[1G\033[K'

# CSI sequences (colors, cursor movement, erase), OSC strings (window titles,
# hyperlinks) and the remaining two-byte escapes.
_ANSI_PATTERN = re.compile(
    r'\x1b\[[0-?]*[ -/]*[@-~]'
    r'|\x1b\][^\x07\x1b]*(?:\x07|\x1b\\)'
    r'|\x1b[@-Z\\-_]'
)


def strip_ansi(text: str) -> str:
    return _ANSI_PATTERN.sub('', text)
