"""
State and effect hooks for function components of the reference host.

Hooks may only be called while a component is rendering, and must be
called in the same order on every render of that component.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from treeprobe.host.fake.elements import Context
from treeprobe.host.fake.errors import HostError
from typing import Any, Generic, TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from treeprobe.host.fake.reconciler import Fiber, FiberRoot


_T = TypeVar('_T')

_UNSET = object()


# ------------------------------------------------------------------------------
# Hook State

class StateHook(Generic[_T]):
    def __init__(self, value: _T, fiber_root: FiberRoot, owner_name: str) -> None:
        self.value = value
        self.queue = []  # type: list[Any]
        self.alive = True
        self._fiber_root = fiber_root
        self._owner_name = owner_name

    def set_value(self, action: _T | Callable[[_T], _T]) -> None:
        """
        Queues a new value, or a function from the previous value to the
        new value, and schedules a re-render.
        Ignored once the owning component has been unmounted.
        """
        if not self.alive:
            return
        self.queue.append(action)
        self._fiber_root.schedule_update(self._owner_name)

    def process_queue(self) -> _T:
        for action in self.queue:
            self.value = action(self.value) if callable(action) else action
        self.queue.clear()
        return self.value


class EffectHook:
    def __init__(self) -> None:
        self.deps = _UNSET  # type: Sequence[Any] | None | object
        self.destroy = None  # type: Callable[[], Any] | None
        self.alive = True

    def run_cleanup(self) -> None:
        (destroy, self.destroy) = (self.destroy, None)
        if destroy is not None:
            destroy()


class Ref(Generic[_T]):
    def __init__(self, current: _T) -> None:
        self.current = current

    def __repr__(self) -> str:
        return f'Ref({self.current!r})'


@dataclass
class PendingEffect:
    hook: EffectHook
    create: Callable[[], Any]

    def run(self) -> None:
        if not self.hook.alive:
            return
        self.hook.run_cleanup()
        destroy = self.create()
        self.hook.destroy = destroy if callable(destroy) else None


# ------------------------------------------------------------------------------
# Rendering

@dataclass
class _RenderState:
    fiber_root: FiberRoot
    fiber: Fiber
    contexts: dict[Context, Any]
    effects: list[PendingEffect]
    index: int = 0
    hook_count_before: int = field(default=0)

    def next_hook(self, kind: type, create: Callable[[], Any]) -> Any:
        hooks = self.fiber.hooks
        if self.index < len(hooks):
            hook = hooks[self.index]
            if not isinstance(hook, kind):
                raise HostError(
                    f'Hook #{self.index} of {owner_name(self.fiber)} changed from '
                    f'{type(hook).__name__} to {kind.__name__} between renders')
        elif self.hook_count_before > 0:
            raise HostError(
                f'{owner_name(self.fiber)} rendered more hooks than during the previous render')
        else:
            hook = create()
            hooks.append(hook)
        self.index += 1
        return hook


_rendering = None  # type: _RenderState | None


def render_with_hooks(
        fiber_root: FiberRoot,
        fiber: Fiber,
        contexts: dict[Context, Any],
        effects: list[PendingEffect],
        ) -> Any:
    """
    Calls the component of `fiber` with its props, giving hooks called
    during the call access to the fiber's hook state.

    Raises:
    * HostError -- if the component used hooks inconsistently.
    * any error raised by the component, unchanged.
    """
    global _rendering
    previous = _rendering  # save
    state = _RenderState(fiber_root, fiber, contexts, effects, hook_count_before=len(fiber.hooks))
    _rendering = state
    try:
        rendered = fiber.type(**fiber.props)
        if state.hook_count_before > 0 and state.index != state.hook_count_before:
            raise HostError(
                f'{owner_name(fiber)} rendered fewer hooks than during the previous render')
        return rendered
    finally:
        _rendering = previous  # restore


def _current(hook_name: str) -> _RenderState:
    if _rendering is None:
        raise HostError(f'{hook_name}() can only be called while a component is rendering')
    return _rendering


def owner_name(fiber: Fiber) -> str:
    t = fiber.type
    return getattr(t, 'display_name', None) or getattr(t, '__name__', None) or repr(t)


# ------------------------------------------------------------------------------
# Hooks

def use_state(initial: _T | Callable[[], _T]) -> tuple[_T, Callable[[Any], None]]:
    """
    Returns (value, set_value). The initial value may be given as a
    function, which is then only called on the first render.
    """
    state = _current('use_state')
    hook = state.next_hook(StateHook, lambda: StateHook(
        initial() if callable(initial) else initial,
        state.fiber_root,
        owner_name(state.fiber),
    ))  # type: StateHook[_T]
    return (hook.process_queue(), hook.set_value)


def use_effect(create: Callable[[], Any], deps: Sequence[Any] | None=None) -> None:
    """
    Runs `create` after the render is committed, whenever `deps` changed
    since the last run (or after every render if `deps` is None).
    If `create` returns a callable, it is called before the next run and
    when the component unmounts.
    """
    state = _current('use_effect')
    hook = state.next_hook(EffectHook, EffectHook)  # type: EffectHook
    if deps is None or hook.deps is _UNSET or not _deps_equal(hook.deps, deps):  # type: ignore[arg-type]
        hook.deps = None if deps is None else tuple(deps)
        state.effects.append(PendingEffect(hook, create))


def use_ref(initial: _T) -> Ref[_T]:
    state = _current('use_ref')
    return state.next_hook(Ref, lambda: Ref(initial))


def use_context(context: Context[_T]) -> _T:
    """Returns the value of the nearest enclosing Provider of `context`."""
    state = _current('use_context')
    if context in state.contexts:
        return state.contexts[context]
    return context.default_value


def _deps_equal(old: Sequence[Any] | None, new: Sequence[Any]) -> bool:
    if old is None or len(old) != len(new):
        return False
    return all(a is b or a == b for (a, b) in zip(old, new))


# ------------------------------------------------------------------------------
