"""
Tests for querying snapshots: find(), find_all(), contains(), is_(),
and access to platform elements.
"""

from treeprobe import (
    AmbiguousMatchError, assert_has_prop, mount, NodeKind, PredicateMatcher,
    Template, TemplateMatcher, to_matcher,
)
from treeprobe.host.fake import DomElement, Fragment, h
import pytest


# === Components ===

def ComplexComponent(object=None):
    return None


def PropsComponent():
    return h(Fragment,
        h('div', label='Hi'),
        h(ComplexComponent, object={'foo': {'bar': 'baz'}}),
    )


def SearchFor(a_prop=None):
    return None


def Searcher(include=False):
    return h('div', h(SearchFor, a_prop='foo') if include else None)


def Greeting():
    return h(Fragment, h('span', 'Hello'), ' ', h('span', 'World'))


def Item(label):
    return h('li', label)


def List(labels=()):
    return h('ul', *[h(Item, label=x, key=x) for x in labels])


# === Tests ===

class TestProps:
    def test_find_returns_element_with_props(self) -> None:
        """Test that a found element exposes its props."""
        root = mount(h(PropsComponent))
        div = root.find('div')
        assert div is not None
        assert div.prop('label') == 'Hi'
        assert_has_prop(div, 'label', 'Hi')

    def test_nested_prop_values_are_kept(self) -> None:
        """Test that nested prop values are kept as given."""
        root = mount(h(PropsComponent))
        complex = root.find(ComplexComponent)
        assert complex is not None
        assert complex.prop('object') == {'foo': {'bar': 'baz'}}

    def test_missing_prop_is_none(self) -> None:
        """Test that prop() returns None for an absent prop."""
        root = mount(h(PropsComponent))
        div = root.find('div')
        assert div is not None
        assert div.prop('nope') is None


class TestFind:
    def test_find_returns_none_when_absent(self) -> None:
        """Test that find() returns None when nothing matches."""
        root = mount(h(PropsComponent))
        assert root.find('table') is None

    def test_find_does_not_match_the_element_itself(self) -> None:
        """Test that find() only searches descendants."""
        root = mount(h(PropsComponent))
        assert root.find(PropsComponent) is None

    def test_find_returns_first_match_in_preorder(self) -> None:
        """Test that find() returns the first match in pre-order."""
        root = mount(h(List, labels=('a', 'b', 'c')))
        item = root.find(Item)
        assert item is not None
        assert item.prop('label') == 'a'

    def test_find_all_returns_matches_in_preorder(self) -> None:
        """Test that find_all() returns every match in pre-order."""
        root = mount(h(List, labels=('a', 'b', 'c')))
        assert [e.text() for e in root.find_all('li')] == ['a', 'b', 'c']
        assert root.find_all('table') == []

    def test_find_with_template_compares_props(self) -> None:
        """Test that find() with an h() template compares props."""
        root = mount(h(List, labels=('a', 'b', 'c')))
        item = root.find(h(Item, label='b'))
        assert item is not None
        assert item.text() == 'b'
        assert root.find(h(Item, label='z')) is None

    def test_find_with_template_object(self) -> None:
        """Test that find_all() accepts a Template."""
        root = mount(h(List, labels=('a', 'b')))
        assert len(root.find_all(Template(Item, {}))) == 2

    def test_find_where_uses_predicate(self) -> None:
        """Test that find_where() and find_all_where() use the predicate."""
        root = mount(h(List, labels=('a', 'bb', 'c')))
        long_item = root.find_where(lambda e: e.type is Item and len(e.prop('label')) > 1)
        assert long_item is not None
        assert long_item.prop('label') == 'bb'
        assert len(root.find_all_where(lambda e: e.kind == NodeKind.HOST_LEAF)) == 3

    def test_find_accepts_explicit_matchers(self) -> None:
        """Test that find() accepts matcher objects directly."""
        root = mount(h(List, labels=('a', 'b')))
        assert root.find(PredicateMatcher(lambda e: e.prop('label') == 'b')) is not None
        assert root.find(TemplateMatcher(Item, {'label': 'a'})) is not None

    def test_predicate_errors_propagate(self) -> None:
        """Test that errors raised by a predicate reach the caller."""
        root = mount(h(List, labels=('a',)))
        def explode(e):
            raise ZeroDivisionError()
        with pytest.raises(ZeroDivisionError):
            root.find_where(explode)


class TestContains:
    def test_contains_template_with_matching_props(self) -> None:
        """Test that contains() finds a descendant with matching props."""
        root = mount(h(Searcher, include=True))
        assert root.contains(h(SearchFor, a_prop='foo'))

    def test_does_not_contain_template_with_other_props(self) -> None:
        """Test that contains() rejects a descendant with other props."""
        root = mount(h(Searcher, include=True))
        assert not root.contains(h(SearchFor, a_prop='bar'))

    def test_does_not_contain_missing_component(self) -> None:
        """Test that contains() is false when the component is not rendered."""
        root = mount(h(Searcher, include=False))
        assert not root.contains(h(SearchFor, a_prop='foo'))
        assert not root.contains(SearchFor)

    def test_bare_type_matches_any_props(self) -> None:
        """Test that contains() with a bare type ignores props."""
        root = mount(h(Searcher, include=True))
        assert root.contains(SearchFor)
        assert root.contains('div')


class TestIs:
    def test_is_compares_type_and_template(self) -> None:
        """Test that is_() checks only the element itself."""
        root = mount(h(PropsComponent))
        (div, complex) = root.children
        assert div.is_('div')
        assert not div.is_(ComplexComponent)
        assert div.is_(h('div', label='Hi'))
        assert not div.is_(h('div', label='Bye'))
        assert root.is_(PropsComponent)


class TestDomNodes:
    def test_get_dom_node_of_single_host_child(self) -> None:
        """Test that get_dom_node() returns the only host child."""
        root = mount(h(Searcher, include=True))
        node = root.get_dom_node()
        assert isinstance(node, DomElement)
        assert node.tag == 'div'

    def test_get_dom_node_with_multiple_host_children_is_ambiguous(self) -> None:
        """Test that get_dom_node() raises with several host children."""
        root = mount(h(Greeting))
        with pytest.raises(AmbiguousMatchError):
            root.get_dom_node()

    def test_get_dom_nodes_returns_each_host_child(self) -> None:
        """Test that get_dom_nodes() returns every host child in order."""
        root = mount(h(Greeting))
        nodes = root.get_dom_nodes()
        assert [n.text_content for n in nodes] == ['Hello', 'World']

    def test_get_dom_node_without_host_children_is_none(self) -> None:
        """Test that get_dom_node() returns None without host children."""
        root = mount(h(ComplexComponent))
        assert root.get_dom_node() is None
        assert root.get_dom_nodes() == []

    def test_component_children_are_not_dom_nodes(self) -> None:
        """Test that component children are skipped by get_dom_nodes()."""
        root = mount(h(PropsComponent))
        nodes = root.get_dom_nodes()
        assert len(nodes) == 1
        assert root.element_children[1].is_dom is False


class TestText:
    def test_text_of_component_includes_all_descendants(self) -> None:
        """Test that text() concatenates the text of all descendants."""
        root = mount(h(Greeting))
        assert root.text() == 'Hello World'
        assert root.snapshot.text() == 'Hello World'

    def test_html_of_host_element_is_its_inner_markup(self) -> None:
        """Test that html() of a host element is its inner markup."""
        root = mount(h('div', h('b', 'bold'), ' text', class_name='box'))
        assert root.snapshot.html() == '<b>bold</b> text'
        assert root.html() == '<div class="box"><b>bold</b> text</div>'


class TestTopLevelSiblings:
    def test_every_top_level_node_is_queryable(self) -> None:
        """Test that a tree mounted as several siblings keeps all of them in the snapshot."""
        root = mount(h(Fragment, h('span', 'Hello'), h('span', 'World')))
        assert [e.text() for e in root.find_all('span')] == ['Hello', 'World']
        assert root.type is None
        assert repr(root) == '<Root Fragment>'

    def test_get_dom_node_over_top_level_siblings_is_ambiguous(self) -> None:
        """Test that get_dom_node() refuses to pick one of several top-level host nodes."""
        root = mount(h(Fragment, h('span', 'Hello'), h('span', 'World')))
        with pytest.raises(AmbiguousMatchError):
            root.get_dom_node()
        assert len(root.get_dom_nodes()) == 2

    def test_top_level_text_is_kept_with_siblings(self) -> None:
        """Test that top-level text appears among the children of the gathered root."""
        root = mount(h(Fragment, h('b', 'a'), 'b'))
        assert root.children[1] == 'b'
        assert root.snapshot.text() == root.text() == 'ab'

    def test_single_top_level_node_is_the_root(self) -> None:
        """Test that a lone top-level node is used as the root directly."""
        root = mount(h(Fragment, h('span', 'only')))
        assert root.type == 'span'


class TestContainsAgreesWithFindWhere:
    @pytest.mark.parametrize('include', [True, False])
    def test_contains_matches_find_where_with_same_matcher(self, include: bool) -> None:
        """Test that contains(x) holds exactly when find_where() finds a node matching x."""
        root = mount(h(Searcher, include=include))
        for x in [
                h(SearchFor, a_prop='foo'),
                h(SearchFor, a_prop='bar'),
                h(SearchFor),
                SearchFor,
                'div',
                'table',
                Template(SearchFor, {'a_prop': 'foo'}),
                ]:
            matcher = to_matcher(x, any_props_for_types=True)
            expected = root.find_where(lambda n: matcher.matches(n)) is not None
            assert root.contains(x) == expected, x
