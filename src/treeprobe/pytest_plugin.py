"""
pytest integration, registered through the pytest11 entry point.

- The `mount` fixture mounts trees with the default host.
- After every test, all roots still alive are destroyed and the reference
  host's clock is reset, so that no test observes another's trees or timers.
"""

from collections.abc import Callable, Iterator
import pytest
from treeprobe.root import drain, mount as _mount, Root
from typing import Any


@pytest.fixture
def mount() -> Iterator[Callable[..., Root]]:
    yield _mount


@pytest.hookimpl(trylast=True)
def pytest_runtest_teardown(item: pytest.Item, nextitem: Any) -> None:
    drain()
    from treeprobe.host.fake import clock
    clock.reset()
