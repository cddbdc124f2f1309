"""
Tests for Root: mounting, perform(), re-synchronization, and the
live-instance registry.
"""

from treeprobe import (
    drain, IllegalStateError, InvalidArgumentError, list_live, mount, Root,
)
from treeprobe.host import default_host, set_default_host
from treeprobe.host.fake import (
    clear_timeout, clock, FakeHost, Fragment, h, set_timeout, use_effect, use_state,
)
import pytest


# === Components ===

def Clicker(on_click):
    return h('div', on_click=on_click)


def ClickCounter():
    (count, set_count) = use_state(0)
    return h(Fragment,
        h('span', count),
        h(Clicker, on_click=lambda: set_count(100)),
    )


def DelayedCounter():
    (count, set_count) = use_state(0)
    def start_timer():
        timeout = set_timeout(lambda: set_count(100), 200)
        return lambda: clear_timeout(timeout)
    use_effect(start_timer)
    return h('span', count)


def Greeter(name='nobody'):
    return h('p', f'Hello {name}')


# === Tests ===

class TestMount:
    def test_mount_builds_snapshot_of_the_mounted_element(self) -> None:
        """Test that mount() snapshots the mounted element."""
        root = mount(h(Greeter, name='Ada'))
        assert root.mounted
        assert root.type is Greeter
        assert root.props['name'] == 'Ada'
        assert root.find('p').text() == 'Hello Ada'

    def test_mount_attaches_container_to_host_document(self) -> None:
        """Test that mount() attaches the container to the document."""
        host = FakeHost()
        root = mount(h(Greeter), host=host)
        assert root.host is host
        assert root.container in host.document.body.child_nodes

    def test_mount_when_already_mounted_is_an_error(self) -> None:
        """Test that mounting twice raises IllegalStateError."""
        root = mount(h(Greeter))
        with pytest.raises(IllegalStateError):
            root.mount()

    def test_remount_after_unmount_renders_again(self) -> None:
        """Test that an unmounted root can be mounted again."""
        root = mount(h(Greeter, name='Ada'))
        root.unmount()
        root.mount()
        assert root.mounted
        assert root.text() == 'Hello Ada'


class TestUnmount:
    def test_reads_after_unmount_are_errors(self) -> None:
        """Test that reads after unmount() raise IllegalStateError."""
        root = mount(h(Greeter))
        root.unmount()
        assert not root.mounted
        with pytest.raises(IllegalStateError):
            root.find('p')
        with pytest.raises(IllegalStateError):
            root.props
        with pytest.raises(IllegalStateError):
            root.text()

    def test_unmount_twice_is_an_error(self) -> None:
        """Test that unmounting twice raises IllegalStateError."""
        root = mount(h(Greeter))
        root.unmount()
        with pytest.raises(IllegalStateError, match='already unmounted'):
            root.unmount()

    def test_unmount_empties_container(self) -> None:
        """Test that unmount() removes the rendered content."""
        root = mount(h(Greeter))
        root.unmount()
        assert root.container.child_nodes == ()

    def test_unmount_runs_effect_cleanups(self) -> None:
        """Test that unmount() runs effect cleanups."""
        root = mount(h(DelayedCounter))
        assert clock.pending_count == 1
        root.unmount()
        assert clock.pending_count == 0


class TestDestroy:
    def test_destroy_unmounts_and_detaches(self) -> None:
        """Test that destroy() unmounts and detaches the container."""
        host = FakeHost()
        root = mount(h(Greeter), host=host)
        root.destroy()
        assert root.destroyed
        assert not root.mounted
        assert root.container not in host.document.body.child_nodes

    def test_destroy_is_idempotent(self) -> None:
        """Test that destroy() may be called more than once."""
        root = mount(h(Greeter))
        root.destroy()
        root.destroy()
        assert root.destroyed

    def test_mount_after_destroy_is_an_error(self) -> None:
        """Test that mounting a destroyed root raises IllegalStateError."""
        root = mount(h(Greeter))
        root.destroy()
        with pytest.raises(IllegalStateError, match='destroyed'):
            root.mount()

    def test_destroy_after_unmount_detaches(self) -> None:
        """Test that destroy() after unmount() leaves the registry."""
        root = mount(h(Greeter))
        root.unmount()
        root.destroy()
        assert root not in list_live()


class TestRegistry:
    def test_mounted_roots_are_live_until_destroyed(self) -> None:
        """Test that list_live() tracks roots in mount order."""
        a = mount(h(Greeter, name='a'))
        b = mount(h(Greeter, name='b'))
        assert list_live() == [a, b]
        a.destroy()
        assert list_live() == [b]

    def test_drain_destroys_every_live_root(self) -> None:
        """Test that drain() destroys all roots and returns their count."""
        roots = [mount(h(Greeter)) for _ in range(3)]
        assert drain() == 3
        assert list_live() == []
        assert all(r.destroyed for r in roots)
        assert drain() == 0

    def test_drain_warns_about_leaked_roots_when_enabled(
            self,
            monkeypatch: pytest.MonkeyPatch,
            capsys: pytest.CaptureFixture[str]) -> None:
        """Test that drain() warns about leaked roots when enabled."""
        monkeypatch.setenv('TREEPROBE_LEAKED_ROOT_WARNINGS', 'True')
        mount(h(Greeter))
        drain()
        assert 'still alive at teardown' in capsys.readouterr().err


class TestPerform:
    def test_trigger_updates_snapshot(self) -> None:
        """Test that triggering a handler updates the snapshot."""
        root = mount(h(ClickCounter))
        assert root.find('span').text() == '0'
        root.find(Clicker).trigger('on_click')
        assert root.find('span').text() == '100'

    def test_old_snapshot_is_not_mutated_by_update(self) -> None:
        """Test that earlier snapshots keep their old values."""
        root = mount(h(ClickCounter))
        old_span = root.find('span')
        root.find(Clicker).trigger('on_click')
        assert old_span.children == ('0',)
        assert old_span.prop('children') == 0
        assert root.find('span') is not old_span

    def test_timer_fired_inside_perform_is_reflected(self) -> None:
        """Test that state set by a timer inside perform() is visible afterwards."""
        root = mount(h(DelayedCounter))
        assert root.find('span').text() == '0'
        root.perform(lambda: clock.tick(1000))
        assert root.find('span').text() == '100'

    def test_perform_returns_result_of_action(self) -> None:
        """Test that perform() returns what the action returned."""
        root = mount(h(Greeter))
        assert root.perform(lambda: 42) == 42

    def test_perform_without_update_keeps_snapshot(self) -> None:
        """Test that update=False leaves the snapshot alone."""
        root = mount(h(DelayedCounter))
        root.perform(lambda: clock.tick(1000), update=False)
        assert root.find('span').children == ('0',)
        root.perform(lambda: None)
        assert root.find('span').children == ('100',)

    def test_errors_from_action_propagate(self) -> None:
        """Test that errors from the action reach the caller."""
        root = mount(h(Greeter))
        with pytest.raises(KeyError):
            root.perform(lambda: {}['missing'])
        assert root.mounted

    def test_trigger_on_root_calls_its_prop(self) -> None:
        """Test that Root.trigger() passes arguments to the handler."""
        calls = []
        root = mount(h(Clicker, on_click=lambda *args: calls.append(args)))
        root.trigger('on_click', 1, 2)
        assert calls == [(1, 2)]

    def test_trigger_non_callable_prop_is_an_error(self) -> None:
        """Test that triggering a missing or non-callable prop raises."""
        root = mount(h(Greeter, name='Ada'))
        with pytest.raises(InvalidArgumentError):
            root.trigger('name')
        with pytest.raises(InvalidArgumentError):
            root.trigger('missing')


class TestSetProps:
    def test_set_props_rerenders_with_merged_props(self) -> None:
        """Test that set_props() re-renders with merged props."""
        root = mount(h(Greeter, name='Ada'))
        root.set_props(name='Grace')
        assert root.props['name'] == 'Grace'
        assert root.text() == 'Hello Grace'

    def test_set_props_preserves_component_state(self) -> None:
        """Test that set_props() keeps component state."""
        def Labelled(label):
            (count, set_count) = use_state(0)
            return h('button', f'{label} {count}', on_click=lambda: set_count(count + 1))
        root = mount(h(Labelled, label='Clicks'))
        root.find('button').trigger('on_click')
        root.set_props(label='Taps')
        assert root.text() == 'Taps 1'

    def test_force_update_rerenders_with_same_props(self) -> None:
        """Test that force_update() renders again."""
        renders = []
        def Counting():
            renders.append(1)
            return None
        root = mount(h(Counting))
        root.force_update()
        assert len(renders) == 2

    def test_set_props_after_unmount_is_an_error(self) -> None:
        """Test that set_props() on an unmounted root raises."""
        root = mount(h(Greeter))
        root.unmount()
        with pytest.raises(IllegalStateError):
            root.set_props(name='x')


class TestDefaultHost:
    def test_mount_uses_replaced_default_host(self) -> None:
        """Test that mount() uses the host given to set_default_host()."""
        host = FakeHost()
        set_default_host(host)
        try:
            root = mount(h(Greeter))
            assert root.host is host
            assert default_host() is host
        finally:
            set_default_host(None)
        assert default_host() is not host


class TestRepr:
    def test_repr_names_mounted_component(self) -> None:
        """Test that repr() names the component or the root's state."""
        root = mount(h(Greeter))
        assert repr(root) == '<Root Greeter>'
        root.destroy()
        assert repr(root) == '<Root (destroyed)>'

    def test_root_is_a_root(self) -> None:
        """Test that mount() returns a Root."""
        assert isinstance(mount(h(Greeter)), Root)
