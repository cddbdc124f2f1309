from io import TextIOBase
import sys
from treeprobe import config

# ------------------------------------------------------------------------------
# Terminal Colors

# ANSI color codes
TERMINAL_FG_RED =           '\033[0;31m'
TERMINAL_FG_GREEN =         '\033[0;32m'
TERMINAL_FG_YELLOW =        '\033[0;33m'
TERMINAL_DIM =              '\033[2m'
TERMINAL_RESET =            '\033[0m'


def print_warning(message: str, file: TextIOBase | None=None) -> None:
    print(colorize(TERMINAL_FG_YELLOW, message), file=file or sys.stderr)


def colorize(color_code: str, str_value: str) -> str:
    return (color_code + str_value + TERMINAL_RESET) if config.colors_enabled() else str_value


# ------------------------------------------------------------------------------
