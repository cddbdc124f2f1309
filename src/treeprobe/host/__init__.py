"""
The interface between treeprobe and a host UI framework.

treeprobe never reads a host framework's private structures directly.
Everything it needs is expressed by the Protocols below, so that a host
can be swapped by supplying another object that satisfies Host.

The reference implementation is treeprobe.host.fake.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Protocol, TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from treeprobe.node import NodeKind


_N = TypeVar('_N')  # internal node
_C = TypeVar('_C')  # container
_R = TypeVar('_R')


# ------------------------------------------------------------------------------
# Protocols

class CurrentRevisionResolver(Protocol[_N]):
    def current_revision(self, node: _N | None) -> _N | None:
        """
        Returns the latest committed revision of the specified internal node,
        or None if the node is None or no longer part of a mounted tree.

        A host may keep several revisions of one tree position while an
        update is in flight. Fields must only ever be read from the revision
        returned here.
        """
        ...


class HostNodeReader(Protocol[_N]):
    """Read access to individual nodes of a host's internal tree."""

    def kind_of(self, node: _N) -> NodeKind: ...
    def type_of(self, node: _N) -> Any: ...
    def props_of(self, node: _N) -> Mapping[str, Any]: ...
    def first_child_of(self, node: _N) -> _N | None: ...
    def next_sibling_of(self, node: _N) -> _N | None: ...
    def instance_of(self, node: _N) -> object | None: ...
    def text_of(self, node: _N) -> str:
        """The literal text of a TEXT_LEAF node."""
        ...


class HostPlatform(Protocol):
    """Read access to platform-level leaf objects, such as DOM elements."""

    def text_content(self, instance: object) -> str: ...
    def inner_html(self, instance: object) -> str: ...
    def is_platform_element(self, instance: object) -> bool: ...


class HostRenderer(Protocol[_N, _C]):
    """Mount, update and settlement primitives."""

    def create_container(self) -> _C: ...
    def attach_container(self, container: _C) -> None: ...
    def detach_container(self, container: _C) -> None: ...

    def render(self, tree: Any, container: _C) -> None: ...
    def unmount(self, container: _C) -> None: ...
    def clone_with_props(self, tree: Any, props: Mapping[str, Any]) -> Any: ...

    def act(self, callback: Callable[[], _R]) -> _R:
        """
        Runs `callback` and then synchronously flushes all work it scheduled,
        including the effects of any resulting renders, before returning
        the callback's result.
        """
        ...

    def root_handle(self, container: _C) -> _N | None:
        """
        Returns a handle to the internal node at the top of the tree rendered
        into `container`. The handle may later refer to a stale revision;
        callers resolve it with CurrentRevisionResolver before each use.
        """
        ...


class Host(
        HostRenderer[_N, _C],
        HostNodeReader[_N],
        HostPlatform,
        CurrentRevisionResolver[_N],
        Protocol):
    pass


# ------------------------------------------------------------------------------
# Default Host

_default_host = None  # type: Host | None


def default_host() -> Host:
    """
    Returns the host used by mount() when none is given explicitly,
    creating a reference host on first use.
    """
    global _default_host
    if _default_host is None:
        from treeprobe.host.fake import FakeHost
        _default_host = FakeHost()
    return _default_host


def set_default_host(host: Host | None) -> None:
    """
    Replaces the host used by mount() when none is given explicitly.
    Passing None restores a fresh reference host on next use.
    """
    global _default_host
    _default_host = host


# ------------------------------------------------------------------------------
