"""
Prop assertions over Elements and Roots, for use from any test framework.

has_prop() returns a result object, in the manner of a custom matcher,
so that other assertion libraries can wrap it. assert_has_prop() and
assert_not_has_prop() raise AssertionError directly and suit plain pytest.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from treeprobe.debug import print_node
from treeprobe.node import Element
from treeprobe.root import Root
from treeprobe.util.cli import colorize, TERMINAL_DIM, TERMINAL_FG_GREEN, TERMINAL_FG_RED
from typing import Any


class _Missing:
    def __repr__(self) -> str:
        return '<missing>'


_MISSING = _Missing()


@dataclass(frozen=True)
class PropCheckResult:
    passed: bool
    _message: Callable[[], str]

    @property
    def message(self) -> str:
        """
        Describes why the check passed or failed.
        When it passed, the message explains the failure of the negated check.
        """
        return self._message()

    def __bool__(self) -> bool:
        return self.passed


def has_prop(node: Element | Root, prop: str, value: Any=_MISSING) -> PropCheckResult:
    """
    Checks whether `node` has the prop `prop`, and if `value` is given,
    whether the prop equals `value`.

    Values are compared with ==, so helpers such as unittest.mock.ANY
    may be used as `value`.

    Raises:
    * IllegalStateError -- if `node` is a Root that is not mounted.
    * InvalidArgumentError -- if the message is rendered for a node without a type.
    """
    value_passed = value is not _MISSING
    props = node.props
    has = prop in props
    passed = (has and props[prop] == value) if value_passed else has

    def message() -> str:
        verb = 'Not to have' if passed else 'To have'
        lines = [
            _hint(negated=passed, value_passed=value_passed),
            '',
            'Expected the element:',
            '  ' + colorize(TERMINAL_FG_RED, print_node(_element_of(node))),
            f'{verb} prop:',
            '  ' + colorize(TERMINAL_FG_GREEN, repr(prop)),
        ]
        if value_passed:
            lines.append('With a value of:')
            lines.append('  ' + colorize(TERMINAL_FG_GREEN, repr(value)))
        if has and not passed:
            lines.append('Received:')
            lines.append('  ' + colorize(TERMINAL_FG_RED, repr(props[prop])))
        return '\n'.join(lines)

    return PropCheckResult(passed, message)


def assert_has_prop(node: Element | Root, prop: str, value: Any=_MISSING) -> None:
    """
    Raises:
    * AssertionError -- if `node` lacks the prop or its value differs.
    """
    result = has_prop(node, prop, value)
    if not result.passed:
        raise AssertionError(result.message)


def assert_not_has_prop(node: Element | Root, prop: str, value: Any=_MISSING) -> None:
    """
    Raises:
    * AssertionError -- if `node` has the prop (with the given value, if any).
    """
    result = has_prop(node, prop, value)
    if result.passed:
        raise AssertionError(result.message)


def _element_of(node: Element | Root) -> Element:
    return node.snapshot if isinstance(node, Root) else node


def _hint(*, negated: bool, value_passed: bool) -> str:
    name = 'assert_not_has_prop' if negated else 'assert_has_prop'
    args = 'element, prop, value' if value_passed else 'element, prop'
    return colorize(TERMINAL_DIM, f'{name}(') + args + colorize(TERMINAL_DIM, ')')


# ------------------------------------------------------------------------------
