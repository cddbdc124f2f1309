"""
The internal tree of the reference host.

Each position in a rendered tree is represented by up to two Fiber objects:
the *current* fiber, which describes what is on screen, and its *alternate*,
which is recycled as the work-in-progress fiber of the next render. After a
render is committed the two swap roles, so any handle held across renders may
point at a stale revision. Readers resolve handles with current_revision()
before reading anything from them.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from treeprobe.host.fake import hooks
from treeprobe.host.fake.dom import DomElement, DomNode, DomText
from treeprobe.host.fake.elements import ContextConsumer, ContextProvider, Fragment, VirtualElement
from treeprobe.host.fake.errors import HostError
from typing import Any, Callable


class FiberTag(Enum):
    HOST_ROOT = 'host_root'
    HOST_COMPONENT = 'host_component'
    HOST_TEXT = 'host_text'
    FUNCTION_COMPONENT = 'function_component'
    FRAGMENT = 'fragment'
    CONTEXT_PROVIDER = 'context_provider'
    CONTEXT_CONSUMER = 'context_consumer'


# ------------------------------------------------------------------------------
# Fiber

class Fiber:
    __slots__ = (
        'tag',
        'type',
        'key',
        'props',
        'text',
        'state_node',
        'parent',
        'child',
        'sibling',
        'alternate',
        'hooks',
        'deleted',
    )

    def __init__(self,
            tag: FiberTag,
            type: Any,
            props: Mapping[str, Any],
            key: object=None,
            ) -> None:
        self.tag = tag
        self.type = type
        self.key = key
        self.props = dict(props)  # type: dict[str, Any]
        self.text = None  # type: str | None
        # DomElement, DomText, or (for HOST_ROOT) the FiberRoot
        self.state_node = None  # type: Any
        self.parent = None  # type: Fiber | None
        self.child = None  # type: Fiber | None
        self.sibling = None  # type: Fiber | None
        self.alternate = None  # type: Fiber | None
        self.hooks = []  # type: list[Any]
        self.deleted = False

    def __repr__(self) -> str:
        return f'Fiber({self.tag.value}, {self.type!r})'


class FiberRoot:
    """The root of one tree rendered into one container."""

    def __init__(self, scheduler: Scheduler, container: DomElement) -> None:
        self.scheduler = scheduler
        self.container = container
        self.element = None  # type: Any
        self.needs_render = False
        self.pending_effects = []  # type: list[hooks.PendingEffect]

        self.current = Fiber(FiberTag.HOST_ROOT, None, {})
        self.current.state_node = self

    def schedule_update(self, owner_name: str) -> None:
        self.needs_render = True
        self.scheduler.on_update_scheduled(owner_name)


class Scheduler:  # abstract
    def on_update_scheduled(self, owner_name: str) -> None:
        raise NotImplementedError()


# ------------------------------------------------------------------------------
# Current Revision

def current_revision(fiber: Fiber | None) -> Fiber | None:
    """
    Returns whichever of `fiber` and its alternate belongs to the committed
    tree, or None if the fiber was deleted or never committed.
    """
    if fiber is None or fiber.deleted:
        return None

    top = fiber
    while top.parent is not None:
        top = top.parent
    if top.tag != FiberTag.HOST_ROOT or not isinstance(top.state_node, FiberRoot):
        return None
    if top is top.state_node.current:
        return fiber

    alternate = fiber.alternate
    if alternate is None or alternate.deleted:
        return None
    return alternate


# ------------------------------------------------------------------------------
# Render

class _Work:
    def __init__(self, fiber_root: FiberRoot) -> None:
        self.fiber_root = fiber_root
        self.deletions = []  # type: list[Fiber]
        self.effects = []  # type: list[hooks.PendingEffect]


def render_root(fiber_root: FiberRoot) -> None:
    """
    Renders fiber_root.element from scratch against the current tree
    and commits the result. Passive effects are queued on the FiberRoot
    for the caller to run.
    """
    work = _Work(fiber_root)
    current = fiber_root.current

    wip = _create_work_in_progress(current, {'children': fiber_root.element})
    wip.parent = None
    _begin_work(work, wip, {})

    _commit_root(fiber_root, wip, work.deletions)
    fiber_root.current = wip
    fiber_root.pending_effects.extend(work.effects)


def _begin_work(work: _Work, wip: Fiber, contexts: dict) -> None:
    tag = wip.tag
    if tag == FiberTag.HOST_TEXT:
        return
    if tag == FiberTag.FUNCTION_COMPONENT:
        children = hooks.render_with_hooks(work.fiber_root, wip, contexts, work.effects)
    elif tag == FiberTag.CONTEXT_PROVIDER:
        context = wip.type.context
        contexts = {**contexts, context: wip.props.get('value', context.default_value)}
        children = wip.props.get('children')
    elif tag == FiberTag.CONTEXT_CONSUMER:
        context = wip.type.context
        render = wip.props.get('children')
        if not callable(render):
            raise HostError(f'{context.display_name}.Consumer expects a function as its only child')
        children = render(contexts[context] if context in contexts else context.default_value)
    else:
        children = wip.props.get('children')

    if isinstance(children, VirtualElement) and children.type is Fragment and children.key is None:
        # An unkeyed fragment at the top of a child list adds no node of its own
        children = children.props.get('children')

    old_first_child = wip.alternate.child if wip.alternate is not None else None
    _reconcile_children(work, wip, old_first_child, list(_flatten_children(children)))

    child = wip.child
    while child is not None:
        _begin_work(work, child, contexts)
        child = child.sibling


def _reconcile_children(
        work: _Work,
        wip: Fiber,
        old_first_child: Fiber | None,
        new_children: list[VirtualElement | str],
        ) -> None:
    # Index the previous children by key, or by position if unkeyed
    old_for_slot = {}  # type: dict[tuple[str, object], Fiber]
    old = old_first_child
    index = 0
    while old is not None:
        old_for_slot[_slot(old.key, index)] = old
        old = old.sibling
        index += 1

    previous = None  # type: Fiber | None
    wip.child = None
    for (index, child) in enumerate(new_children):
        if isinstance(child, str):
            (tag, fiber_type, props, key) = (FiberTag.HOST_TEXT, None, {}, None)
        else:
            (tag, fiber_type) = _classify(child.type)
            (props, key) = (child.props, child.key)

        old = old_for_slot.pop(_slot(key, index), None)
        if old is not None and old.tag == tag and old.type == fiber_type:
            new = _create_work_in_progress(old, props)
        else:
            if old is not None:
                work.deletions.append(old)
            new = Fiber(tag, fiber_type, props, key)
        new.text = child if isinstance(child, str) else None

        new.parent = wip
        if previous is None:
            wip.child = new
        else:
            previous.sibling = new
        previous = new

    work.deletions.extend(old_for_slot.values())


def _create_work_in_progress(current: Fiber, props: Mapping[str, Any]) -> Fiber:
    wip = current.alternate
    if wip is None:
        wip = Fiber(current.tag, current.type, props, current.key)
        wip.alternate = current
        current.alternate = wip
    else:
        wip.props = dict(props)
    wip.state_node = current.state_node
    wip.hooks = list(current.hooks)
    wip.text = current.text
    wip.child = None
    wip.sibling = None
    wip.deleted = False
    return wip


def _classify(element_type: Any) -> tuple[FiberTag, Any]:
    if isinstance(element_type, str):
        return (FiberTag.HOST_COMPONENT, element_type)
    if element_type is Fragment:
        return (FiberTag.FRAGMENT, None)
    if isinstance(element_type, ContextProvider):
        return (FiberTag.CONTEXT_PROVIDER, element_type)
    if isinstance(element_type, ContextConsumer):
        return (FiberTag.CONTEXT_CONSUMER, element_type)
    if callable(element_type):
        return (FiberTag.FUNCTION_COMPONENT, element_type)
    raise HostError(f'Unsupported element type: {element_type!r}')


def _slot(key: object, index: int) -> tuple[str, object]:
    return ('key', key) if key is not None else ('index', index)


def _flatten_children(children: Any) -> Iterable[VirtualElement | str]:
    if children is None or isinstance(children, bool):
        return
    if isinstance(children, (VirtualElement, str)):
        yield children
    elif isinstance(children, (int, float)):
        yield str(children)
    elif isinstance(children, (list, tuple)):
        for c in children:
            yield from _flatten_children(c)
    else:
        raise HostError(f'Objects are not valid as children: {children!r}')


# ------------------------------------------------------------------------------
# Commit

def _commit_root(fiber_root: FiberRoot, wip_root: Fiber, deletions: list[Fiber]) -> None:
    for fiber in deletions:
        _commit_deletion(fiber)
    fiber_root.container.replace_children(_commit_work(wip_root))


def _commit_work(fiber: Fiber) -> list[DomNode]:
    """Updates platform nodes beneath `fiber`, returning its top-level platform nodes."""
    child_nodes = []  # type: list[DomNode]
    child = fiber.child
    while child is not None:
        child_nodes.extend(_commit_work(child))
        child = child.sibling

    if fiber.tag == FiberTag.HOST_TEXT:
        assert fiber.text is not None
        if fiber.state_node is None:
            fiber.state_node = DomText(fiber.text)
        else:
            fiber.state_node.data = fiber.text
        return [fiber.state_node]
    elif fiber.tag == FiberTag.HOST_COMPONENT:
        if fiber.state_node is None:
            fiber.state_node = DomElement(fiber.type)
        element = fiber.state_node  # type: DomElement
        element.set_props(fiber.props)
        element.replace_children(child_nodes)
        return [element]
    else:
        return child_nodes


def _commit_deletion(fiber: Fiber) -> None:
    for f in _walk(fiber):
        for hook in f.hooks:
            if isinstance(hook, hooks.EffectHook):
                hook.alive = False
                hook.run_cleanup()
            elif isinstance(hook, hooks.StateHook):
                hook.alive = False
        f.deleted = True
        if f.alternate is not None:
            f.alternate.deleted = True


def _walk(fiber: Fiber) -> Iterable[Fiber]:
    """Yields `fiber` and all fibers beneath it, in pre-order."""
    stack = [fiber]
    while len(stack) > 0:
        f = stack.pop()
        yield f
        children = []
        c = f.child
        while c is not None:
            children.append(c)
            c = c.sibling
        stack.extend(reversed(children))


# ------------------------------------------------------------------------------
# Effects

def run_pending_effects(fiber_root: FiberRoot) -> bool:
    """Runs queued passive effects. Returns whether any were queued."""
    (effects, fiber_root.pending_effects) = (fiber_root.pending_effects, [])
    for effect in effects:
        effect.run()
    return len(effects) > 0


# ------------------------------------------------------------------------------
