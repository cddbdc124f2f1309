"""
Environment-driven settings.

Each setting is read when it is needed rather than at import time,
so that tests may adjust the environment with monkeypatch.
"""

import os


def colors_enabled() -> bool:
    """Whether assertion messages and warnings use ANSI colors."""
    return os.environ.get('TREEPROBE_COLORS', 'True') == 'True'


def leaked_root_warnings_enabled() -> bool:
    """Whether drain() warns about roots that were still mounted at teardown."""
    return os.environ.get('TREEPROBE_LEAKED_ROOT_WARNINGS', 'False') == 'True'


def unwrapped_update_warnings_enabled() -> bool:
    """Whether the reference host warns about updates scheduled outside act()."""
    return os.environ.get('TREEPROBE_UNWRAPPED_UPDATE_WARNINGS', 'True') == 'True'


def debug_max_children() -> int:
    """Number of children printed by debug() before the middle ones are elided."""
    return int(os.environ.get('TREEPROBE_DEBUG_MAX_CHILDREN', '7'))


def max_update_depth() -> int:
    """Number of render passes the reference host allows in one flush."""
    return int(os.environ.get('TREEPROBE_MAX_UPDATE_DEPTH', '50'))
