"""
Mounting a tree and keeping its snapshot in sync with the host.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from treeprobe import config
from treeprobe.errors import IllegalStateError
from treeprobe.host import default_host, Host
from treeprobe.matchers import describe_type
from treeprobe.node import Element, NodeKind, Predicate
from treeprobe.snapshot import TreeSnapshotBuilder
from treeprobe.util.cli import print_warning
from typing import Any, Generic, TypeVar


_P = TypeVar('_P')  # props, for documentation only
_T = TypeVar('_T')


# ------------------------------------------------------------------------------
# Live-Instance Registry

# Roots whose container is attached to the host environment, in attach order.
#
# Populated by Root.mount(), emptied by Root.destroy().
# A test harness is expected to call drain() after each test.
connected = {}  # type: dict[Root, None]


def list_live() -> list[Root]:
    """Returns all roots that have been mounted and not yet destroyed."""
    return list(connected)


def drain() -> int:
    """
    Destroys every live root, emptying the live-instance registry.
    Returns the number of roots destroyed.

    Intended to be called from a test harness's per-test teardown hook.
    """
    roots = list(connected)
    if len(roots) > 0 and config.leaked_root_warnings_enabled():
        print_warning(
            f'*** {len(roots)} mounted tree(s) were still alive at teardown: '
            f'{roots!r}')
    for root in roots:
        root.destroy()
    return len(roots)


# ------------------------------------------------------------------------------
# Root

class Root(Generic[_P]):
    """
    Owns one tree mounted into a host container, and the current immutable
    snapshot of that tree.

    Every externally observable mutation goes through perform(), which lets
    the host settle all work caused by the mutation and then replaces the
    snapshot. Reads are served from the snapshot alone.

    Reads raise IllegalStateError while nothing is mounted, so a caller
    never observes a snapshot that disagrees with the host's most recently
    settled tree.
    """

    def __init__(self, tree: Any, *, host: Host | None=None) -> None:
        """
        Mounts `tree` immediately.

        Raises:
        * any error raised by the host while rendering
        """
        self._tree = tree
        self._host = host if host is not None else default_host()  # type: Host
        self._builder = TreeSnapshotBuilder(
            self._host, self._host, self._host, root=self)
        self._container = self._host.create_container()
        self._attached = False
        self._destroyed = False
        self._handle = None  # type: object | None
        self._root = None  # type: Element | None

        self.mount()

    # === Properties ===

    @property
    def host(self) -> Host:
        return self._host

    @property
    def container(self) -> object:
        return self._container

    @property
    def mounted(self) -> bool:
        return self._handle is not None

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    @property
    def children(self) -> tuple[Element | str, ...]:
        return self._with_root(lambda root: root.children)

    @property
    def element_children(self) -> tuple[Element, ...]:
        return self._with_root(lambda root: root.element_children)

    @property
    def descendants(self) -> tuple[Element, ...]:
        return self._with_root(lambda root: root.descendants)

    @property
    def props(self) -> Mapping[str, Any]:
        return self._with_root(lambda root: root.props)

    @property
    def type(self) -> Any:
        return self._with_root(lambda root: root.type)

    @property
    def is_dom(self) -> bool:
        return self._with_root(lambda root: root.is_dom)

    @property
    def instance(self) -> object | None:
        return self._with_root(lambda root: root.instance)

    @property
    def snapshot(self) -> Element:
        """
        The current snapshot of the mounted tree.

        Raises:
        * IllegalStateError -- if nothing is mounted.
        """
        return self._with_root(lambda root: root)

    # === Actions ===

    def perform(self, action: Callable[[], _T], *, update: bool=True) -> _T:
        """
        Runs `action` inside the host's settlement boundary, then rebuilds
        the snapshot, returning whatever `action` returned.

        When this method returns, all work scheduled as a consequence of
        `action` has run and the new snapshot is installed.
        Pass update=False to skip rebuilding the snapshot.

        Raises:
        * any error raised by `action` or by the host, unchanged.
          In that case the snapshot is not rebuilt.
        """
        result = self._host.act(action)
        if update:
            self._update()
        return result

    def trigger(self, prop: str, *args, **kwargs) -> Any:
        return self._with_root(lambda root: root.trigger(prop, *args, **kwargs))

    def set_props(self, **props) -> None:
        """
        Re-renders the mounted tree with `props` merged over its current props.

        Raises:
        * IllegalStateError -- if nothing is mounted.
        """
        self._ensure_root()
        self._tree = self._host.clone_with_props(self._tree, props)
        self.perform(lambda: self._host.render(self._tree, self._container))

    def force_update(self) -> None:
        """
        Re-renders the mounted tree with unchanged props.

        Raises:
        * IllegalStateError -- if nothing is mounted.
        """
        self._ensure_root()
        self.perform(lambda: self._host.render(self._tree, self._container))

    # === Lifecycle ===

    def mount(self) -> None:
        """
        Raises:
        * IllegalStateError -- if already mounted or destroyed.
        """
        if self._destroyed:
            raise IllegalStateError('Attempted to mount a node that was already destroyed')
        if self.mounted:
            raise IllegalStateError('Attempted to mount a node that was already mounted')

        if not self._attached:
            self._host.attach_container(self._container)
            self._attached = True
            connected[self] = None

        def render() -> None:
            self._host.render(self._tree, self._container)
            self._handle = self._host.root_handle(self._container)
        self.perform(render)

    def unmount(self) -> None:
        """
        Raises:
        * IllegalStateError -- if not mounted.
        """
        if not self.mounted:
            raise IllegalStateError(
                'You attempted to unmount a node that was already unmounted')

        def unmount() -> None:
            self._host.unmount(self._container)
            self._handle = None
        self.perform(unmount)

    def destroy(self) -> None:
        """
        Unmounts the tree if it is still mounted, detaches the container
        from the host environment, and removes this root from the
        live-instance registry.

        Calling destroy() again has no further effect.
        """
        if self._destroyed:
            return
        if self.mounted:
            self.unmount()
        if self._attached:
            self._host.detach_container(self._container)
            self._attached = False
        connected.pop(self, None)
        self._destroyed = True

    # === Reads ===

    def html(self) -> str:
        """The markup rendered into the container."""
        self._ensure_root()
        # Usually we defer to the snapshot, but the container is a quicker path
        return self._host.inner_html(self._container)

    def text(self) -> str:
        """The text content rendered into the container."""
        self._ensure_root()
        return self._host.text_content(self._container)

    def debug(self, *, depth: int | None=None, all_props: bool=False) -> str:
        return self._with_root(lambda root: root.debug(depth=depth, all_props=all_props))

    def prop(self, key: str) -> Any:
        return self._with_root(lambda root: root.prop(key))

    def is_(self, type_or_template: object) -> bool:
        return self._with_root(lambda root: root.is_(type_or_template))

    def find(self, type_or_template: object) -> Element | None:
        return self._with_root(lambda root: root.find(type_or_template))

    def find_all(self, type_or_template: object) -> list[Element]:
        return self._with_root(lambda root: root.find_all(type_or_template))

    def find_where(self, predicate: Predicate) -> Element | None:
        return self._with_root(lambda root: root.find_where(predicate))

    def find_all_where(self, predicate: Predicate) -> list[Element]:
        return self._with_root(lambda root: root.find_all_where(predicate))

    def contains(self, type_or_template: object) -> bool:
        return self._with_root(lambda root: root.contains(type_or_template))

    def get_dom_node(self) -> object | None:
        return self._with_root(lambda root: root.get_dom_node())

    def get_dom_nodes(self) -> list[object]:
        return self._with_root(lambda root: root.get_dom_nodes())

    # === Utility ===

    def _update(self) -> None:
        if self._handle is None:
            self._root = None
            return
        (children, descendants) = self._builder.build_children(self._handle)
        if len(children) == 0:
            self._root = None
        elif len(children) == 1 and isinstance(children[0], Element):
            # A single top-level node is the mounted element itself
            self._root = children[0]
        else:
            # Several top-level nodes are gathered under a fragment-like root,
            # so that queries see all of them
            self._root = Element(
                NodeKind.COMPONENT, None, {}, None, children, descendants,
                platform=self._host, root=self)

    def _ensure_root(self) -> None:
        if self._handle is None or self._root is None:
            raise IllegalStateError(
                'Attempted to operate on a mounted tree, '
                'but the component is no longer mounted')

    def _with_root(self, with_root: Callable[[Element], _T]) -> _T:
        self._ensure_root()
        assert self._root is not None
        return with_root(self._root)

    # === Formatting ===

    def __repr__(self) -> str:
        if self._root is None:
            state = 'destroyed' if self._destroyed else 'unmounted'
            return f'<Root ({state})>'
        name = describe_type(self._root.type) if self._root.type is not None else 'Fragment'
        return f'<Root {name}>'


# ------------------------------------------------------------------------------
# Utility: Mount

def mount(tree: Any, *, host: Host | None=None) -> Root:
    """
    Mounts `tree` into a fresh container of `host` (or of the default host)
    and returns the Root that owns it.
    """
    return Root(tree, host=host)


# ------------------------------------------------------------------------------
