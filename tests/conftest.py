from collections.abc import Iterator
import pytest
from treeprobe.host.fake import clock
from treeprobe.root import drain


@pytest.fixture(autouse=True)
def _isolate_mounted_trees(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    # Keep assertion messages free of ANSI codes so they can be compared
    monkeypatch.setenv('TREEPROBE_COLORS', 'False')
    yield
    drain()
    clock.reset()
