"""
Materializes immutable Element snapshots from a host's live internal tree.
"""

from __future__ import annotations

from treeprobe.host import CurrentRevisionResolver, HostNodeReader, HostPlatform
from treeprobe.node import Element, NodeKind
from typing import Generic, TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from treeprobe.root import Root


_N = TypeVar('_N')  # internal node


class TreeSnapshotBuilder(Generic[_N]):
    """
    Walks a host's internal tree and builds a tree of Elements describing it.

    For a fixed revision of the host tree, building is deterministic:
    the same handle always yields a structurally identical snapshot.
    Props are copied into each Element, so later mutation of the host's
    own props storage never leaks into a snapshot.
    """

    def __init__(self,
            resolver: CurrentRevisionResolver[_N],
            reader: HostNodeReader[_N],
            platform: HostPlatform | None=None,
            *, root: Root | None=None,
            ) -> None:
        self._resolver = resolver
        self._reader = reader
        self._platform = platform
        self._root = root

    def build(self, handle: _N | None) -> Element | str | None:
        """
        Builds the snapshot of the tree position referred to by `handle`.

        Returns the literal text for a text position, or None if the handle
        is None or detached from any mounted tree.
        """
        node = self._resolver.current_revision(handle)
        if node is None:
            return None
        return self._build_node(node)

    def build_children(self,
            handle: _N | None,
            ) -> tuple[list[Element | str], list[Element]]:
        """
        Builds only the (children, descendants) lists beneath the tree position
        referred to by `handle`. Both are empty if the handle is None or detached.
        """
        node = self._resolver.current_revision(handle)
        if node is None:
            return ([], [])
        return self._build_children_of(node)

    # === Utility ===

    def _build_node(self, node: _N) -> Element | str:
        reader = self._reader  # cache

        kind = reader.kind_of(node)
        if kind == NodeKind.TEXT_LEAF:
            return reader.text_of(node)

        props = dict(reader.props_of(node) or {})
        (children, descendants) = self._build_children_of(node)
        return Element(
            kind,
            reader.type_of(node),
            props,
            reader.instance_of(node) if kind.is_dom else None,
            children,
            descendants,
            platform=self._platform,
            root=self._root,
        )

    def _build_children_of(self,
            node: _N,
            ) -> tuple[list[Element | str], list[Element]]:
        children = []  # type: list[Element | str]
        descendants = []  # type: list[Element]

        child = self._resolver.current_revision(self._reader.first_child_of(node))
        while child is not None:
            result = self._build_node(child)
            children.append(result)
            if isinstance(result, Element):
                descendants.append(result)
                descendants.extend(result.descendants)

            # Every node is resolved before any of its fields are read
            child = self._resolver.current_revision(self._reader.next_sibling_of(child))

        return (children, descendants)


# ------------------------------------------------------------------------------
