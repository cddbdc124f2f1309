"""
Human-readable descriptions of snapshots, for failure messages and
interactive debugging.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from treeprobe import config
from treeprobe.errors import InvalidArgumentError
from treeprobe.matchers import CHILDREN_PROP, describe_type
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from treeprobe.node import Element


_INDENT = '  '
_MAX_PROP_VALUE_LENGTH = 50


# ------------------------------------------------------------------------------
# Single Node

def print_node(node: Element) -> str:
    """
    Returns a short self-closing tag naming the node, like `<Button />`.

    Raises:
    * InvalidArgumentError -- if the node has no type, as for a fragment.
    """
    if node.type is None:
        raise InvalidArgumentError('Tried to print an invalid node')
    return f'<{describe_type(node.type)} />'


# ------------------------------------------------------------------------------
# Tree

def to_tree_string(
        node: Element,
        *, depth: int | None=None,
        all_props: bool=False,
        ) -> str:
    """
    Describes a node and its descendants in a JSX-like form.

    - Fragments contribute their children but no tag of their own.
    - At most `depth` levels beneath `node` are described;
      deeper children are elided as `...`.
    - Unless `all_props` is set, long prop values are elided as `{...}`.
    - Long child lists are shortened to their first and last few children
      around a `More(Count=N)` marker.
    """
    return '\n'.join(_describe(node, depth=depth, all_props=all_props))


def _describe(node: Element | str, *, depth: int | None, all_props: bool) -> list[str]:
    if isinstance(node, str):
        return [node]

    children_lines = (
        _describe_children(node.children, depth=depth, all_props=all_props)
        if depth is None or depth > 0
        else (['...'] if len(node.children) > 0 else [])
    )
    if node.type is None:
        return children_lines

    name = describe_type(node.type)
    opening = name + _describe_props(node.props, all_props=all_props)
    if len(children_lines) == 0:
        return [f'<{opening} />']
    if len(children_lines) == 1 and len(node.children) == 1 and isinstance(node.children[0], str):
        # Keep short text content inline, as in <span>Hello</span>
        return [f'<{opening}>{children_lines[0]}</{name}>']

    lines = [f'<{opening}>']
    lines.extend(_INDENT + x for x in children_lines)
    lines.append(f'</{name}>')
    return lines


def _describe_children(
        children: Sequence[Element | str],
        *, depth: int | None,
        all_props: bool,
        ) -> list[str]:
    child_depth = (depth - 1) if depth is not None else None
    max_children = max(config.debug_max_children(), 3)

    lines = []  # type: list[str]
    if len(children) > max_children:
        # Show the first and last few children around a More(...) marker,
        # such that no more than max_children lines are displayed
        head_count = (max_children - 1) // 2
        tail_count = (max_children - 1) - head_count
        for c in children[:head_count]:
            lines.extend(_describe(c, depth=child_depth, all_props=all_props))
        lines.append(f'More(Count={len(children) - head_count - tail_count})')
        for c in children[len(children) - tail_count:]:
            lines.extend(_describe(c, depth=child_depth, all_props=all_props))
    else:
        for c in children:
            lines.extend(_describe(c, depth=child_depth, all_props=all_props))
    return lines


def _describe_props(props: Mapping[str, Any], *, all_props: bool) -> str:
    parts = []
    for (key, value) in props.items():
        if key == CHILDREN_PROP:
            continue
        parts.append(f' {key}={_describe_prop_value(value, all_props=all_props)}')
    return ''.join(parts)


def _describe_prop_value(value: object, *, all_props: bool) -> str:
    if isinstance(value, str):
        if not all_props and len(value) > _MAX_PROP_VALUE_LENGTH:
            return '{...}'
        return f'"{value}"' if '"' not in value else '{' + repr(value) + '}'
    if callable(value):
        return '{<function ' + getattr(value, '__name__', type(value).__name__) + '>}'
    value_repr = repr(value)
    if not all_props and len(value_repr) > _MAX_PROP_VALUE_LENGTH:
        return '{...}'
    return '{' + value_repr + '}'


# ------------------------------------------------------------------------------
