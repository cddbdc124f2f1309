"""
treeprobe mounts a component tree in a headless host, then lets tests
query, assert on, and interact with an immutable snapshot of what was
rendered.

    >>> from treeprobe import mount
    >>> from treeprobe.host.fake import h
    >>> root = mount(h('div', h('span', 'Hello'), label='Hi'))
    >>> root.prop('label')
    'Hi'
    >>> root.find('span').text()
    'Hello'
"""

from treeprobe.assertions import (
    assert_has_prop, assert_not_has_prop, has_prop, PropCheckResult,
)
from treeprobe.errors import AmbiguousMatchError, IllegalStateError, InvalidArgumentError
from treeprobe.matchers import (
    ANY_PROPS, PredicateMatcher, Template, TemplateMatcher, to_matcher, TypeMatcher,
)
from treeprobe.node import Element, NodeKind
from treeprobe.root import connected, drain, list_live, mount, Root
from treeprobe.snapshot import TreeSnapshotBuilder

__all__ = [
    'AmbiguousMatchError',
    'ANY_PROPS',
    'assert_has_prop',
    'assert_not_has_prop',
    'connected',
    'drain',
    'Element',
    'has_prop',
    'IllegalStateError',
    'InvalidArgumentError',
    'list_live',
    'mount',
    'NodeKind',
    'PredicateMatcher',
    'PropCheckResult',
    'Root',
    'Template',
    'TemplateMatcher',
    'to_matcher',
    'TreeSnapshotBuilder',
    'TypeMatcher',
]
