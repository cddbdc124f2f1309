"""
Traversal over a snapshot's flattened descendant list.

These functions never mutate the sequences they are given and never
suspend. Exceptions raised by a matcher, including user predicates,
propagate unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
from treeprobe.errors import AmbiguousMatchError
from treeprobe.matchers import Matcher
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from treeprobe.node import Element


def find_first(descendants: Sequence[Element], matcher: Matcher) -> Element | None:
    for element in descendants:
        if matcher.matches(element):
            return element
    return None


def find_all(descendants: Sequence[Element], matcher: Matcher) -> list[Element]:
    return [e for e in descendants if matcher.matches(e)]


def contains(descendants: Sequence[Element], matcher: Matcher) -> bool:
    return find_first(descendants, matcher) is not None


def dom_nodes(element_children: Sequence[Element]) -> list[object]:
    return [
        c.instance
        for c in element_children
        if c.is_dom and c.instance is not None
    ]


def single_dom_node(element_children: Sequence[Element]) -> object | None:
    """
    Raises:
    * AmbiguousMatchError
    """
    nodes = dom_nodes(element_children)
    if len(nodes) > 1:
        raise AmbiguousMatchError(
            'You can’t call get_dom_node() on an element that returns multiple '
            'platform elements. Call get_dom_nodes() to retrieve all of the '
            'elements instead.')
    return nodes[0] if len(nodes) == 1 else None
