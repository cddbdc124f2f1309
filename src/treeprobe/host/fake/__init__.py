"""
A small in-process component framework, used as treeprobe's default host.

Provides:
* element descriptions -- h(), Fragment, create_context()
* function components with hooks -- use_state(), use_effect(), use_ref(), use_context()
* a headless document -- DomElement, DomText
* a virtual clock -- clock, set_timeout(), clear_timeout()
* FakeHost -- the treeprobe.host.Host implementation tying these together

Example:
    >>> def Counter():
    ...     (count, set_count) = use_state(0)
    ...     return h(Fragment,
    ...         h('span', count),
    ...         h('button', on_click=lambda: set_count(count + 1)))
    >>> root = mount(h(Counter))
    >>> root.find('button').trigger('on_click')
    >>> root.find('span').text()
    '1'
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from treeprobe import config
from treeprobe.errors import InvalidArgumentError
from treeprobe.host.fake.clock import clear_timeout, clock, FakeClock, set_timeout
from treeprobe.host.fake.dom import Document, DomElement, DomNode, DomText
from treeprobe.host.fake.elements import (
    component, Context, create_context, Fragment, h, VirtualElement,
)
from treeprobe.host.fake.errors import HostError
from treeprobe.host.fake.hooks import Ref, use_context, use_effect, use_ref, use_state
from treeprobe.host.fake.reconciler import (
    current_revision, Fiber, FiberRoot, FiberTag, render_root, run_pending_effects, Scheduler,
)
from treeprobe.node import NodeKind
from treeprobe.util.cli import print_warning
from typing import Any, TypeVar
from typing_extensions import override

__all__ = [
    'clear_timeout',
    'clock',
    'component',
    'Context',
    'create_context',
    'Document',
    'DomElement',
    'DomNode',
    'DomText',
    'FakeClock',
    'FakeHost',
    'Fragment',
    'h',
    'HostError',
    'Ref',
    'set_timeout',
    'use_context',
    'use_effect',
    'use_ref',
    'use_state',
    'VirtualElement',
]


_R = TypeVar('_R')


class FakeHost(Scheduler):
    """
    Renders VirtualElement trees into DomElement containers of a headless
    Document, implementing treeprobe.host.Host.

    Rendering is synchronous. State updates requested inside act() are
    batched and flushed, together with any effects they cause, when the
    outermost act() returns. Updates requested outside act() are queued
    until the next act() and reported with a warning.
    """

    def __init__(self, document: Document | None=None) -> None:
        self.document = document if document is not None else Document()
        self._roots = {}  # type: dict[DomElement, FiberRoot]
        self._act_depth = 0
        self._flushing = False

    # === HostRenderer ===

    def create_container(self) -> DomElement:
        return self.document.create_element('div')

    def attach_container(self, container: DomElement) -> None:
        self.document.body.append_child(container)

    def detach_container(self, container: DomElement) -> None:
        container.remove()
        self._roots.pop(container, None)

    def render(self, tree: Any, container: DomElement) -> None:
        """
        Renders `tree` into `container`, replacing whatever was rendered there.
        Outside of act() the render happens immediately.
        """
        fiber_root = self._roots.get(container)
        if fiber_root is None:
            fiber_root = self._roots[container] = FiberRoot(self, container)
        fiber_root.element = tree
        fiber_root.needs_render = True
        if self._act_depth == 0:
            self._flush()

    def unmount(self, container: DomElement) -> None:
        """Removes everything rendered into `container`, running effect cleanups."""
        fiber_root = self._roots.get(container)
        if fiber_root is None:
            return
        fiber_root.element = None
        fiber_root.needs_render = True
        if self._act_depth == 0:
            self._flush()

    def clone_with_props(self, tree: VirtualElement, props: Mapping[str, Any]) -> VirtualElement:
        return tree.with_props(props)

    def act(self, callback: Callable[[], _R]) -> _R:
        """
        Runs `callback`, then renders and runs effects until no more work is
        pending. Nested calls flush only when the outermost call returns.

        Raises:
        * HostError -- if updates keep scheduling further updates indefinitely.
        * any error raised by `callback` or while rendering, unchanged.
        """
        self._act_depth += 1
        try:
            result = callback()
        finally:
            self._act_depth -= 1
        if self._act_depth == 0:
            self._flush()
        return result

    def root_handle(self, container: DomElement) -> Fiber | None:
        fiber_root = self._roots.get(container)
        return fiber_root.current if fiber_root is not None else None

    # === CurrentRevisionResolver ===

    def current_revision(self, node: Fiber | None) -> Fiber | None:
        return current_revision(node)

    # === HostNodeReader ===

    def kind_of(self, node: Fiber) -> NodeKind:
        if node.tag == FiberTag.HOST_TEXT:
            return NodeKind.TEXT_LEAF
        if node.tag == FiberTag.HOST_COMPONENT:
            child = node.child
            while child is not None:
                if child.tag != FiberTag.HOST_TEXT:
                    return NodeKind.HOST_CONTAINER
                child = child.sibling
            return NodeKind.HOST_LEAF
        return NodeKind.COMPONENT

    def type_of(self, node: Fiber) -> Any:
        return node.type

    def props_of(self, node: Fiber) -> Mapping[str, Any]:
        return node.props

    def first_child_of(self, node: Fiber) -> Fiber | None:
        return node.child

    def next_sibling_of(self, node: Fiber) -> Fiber | None:
        return node.sibling

    def instance_of(self, node: Fiber) -> object | None:
        return node.state_node if node.tag == FiberTag.HOST_COMPONENT else None

    def text_of(self, node: Fiber) -> str:
        return node.text or ''

    # === HostPlatform ===

    def text_content(self, instance: object) -> str:
        """
        Raises:
        * InvalidArgumentError -- if `instance` is not a node of a Document.
        """
        if not isinstance(instance, DomNode):
            raise InvalidArgumentError(f'Expected a DomNode but found {instance!r}')
        return instance.text_content

    def inner_html(self, instance: object) -> str:
        """
        Raises:
        * InvalidArgumentError -- if `instance` is not an element of a Document.
        """
        if not isinstance(instance, DomElement):
            raise InvalidArgumentError(f'Expected a DomElement but found {instance!r}')
        return instance.inner_html

    def is_platform_element(self, instance: object) -> bool:
        return isinstance(instance, DomElement)

    # === Scheduler ===

    @override
    def on_update_scheduled(self, owner_name: str) -> None:
        if self._act_depth == 0 and not self._flushing:
            if config.unwrapped_update_warnings_enabled():
                print_warning(
                    f'*** An update to {owner_name} was not wrapped in act(). '
                    'Trigger state changes with Root.perform() so that the '
                    'snapshot reflects them.')

    # === Utility ===

    def _flush(self) -> None:
        if self._flushing:
            return
        self._flushing = True
        try:
            for _ in range(config.max_update_depth()):
                dirty_roots = [r for r in self._roots.values() if r.needs_render]
                for fiber_root in dirty_roots:
                    fiber_root.needs_render = False
                    render_root(fiber_root)

                ran_effects = False
                for fiber_root in list(self._roots.values()):
                    ran_effects = run_pending_effects(fiber_root) or ran_effects

                if len(dirty_roots) == 0 and not ran_effects:
                    return
            raise HostError(
                'Maximum update depth exceeded. A component is probably '
                'updating its state on every render.')
        finally:
            self._flushing = False


# ------------------------------------------------------------------------------
