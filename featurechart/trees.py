# -*- coding: utf-8 -*-

"""
Chart edges and the derivation trees read back from them.

Like the chart itself, edges are not ordinary trees but hierarchically grouped unions of similar
trees. The structure alternates between edges and edge sets: an edge holds one way of building a
constituent out of its parts, and an edge set holds every edge having the same span, nonterminal,
and feature structure. Since rules only ever look at a child's nonterminal and feature structure,
a whole family of sub-derivations can be combined as if it were a single entity, and the
individual derivations are only spelled out on request.
"""

from functools import reduce
from typing import Optional, Tuple, Union, Iterator, List, Dict, Any

from featurechart.features import FeatureStructure
from featurechart.rules import Rule, LexicalEntry
from featurechart.utility import iter_combinations

__author__ = 'Aaron Hosford'
__all__ = [
    'Edge',
    'EdgeSet',
    'Derivation',
]


class Edge:
    """
    One way of deriving a constituent over a span of the input.

    A leaf edge comes either from a lexical entry or, for words appearing literally in a rule,
    from the word itself; in that case the edge's category is the word and it has no rule. A branch
    edge records the rule that built it, the edge sets it was built from, and the values its
    coreference tags were bound to.
    """

    def __init__(self, start: int, end: int, category: str, features: FeatureStructure,
                 rule: Union[Rule, LexicalEntry, None] = None,
                 components: Tuple['EdgeSet', ...] = None,
                 bindings: FeatureStructure = None):
        if not 0 <= start < end:
            raise ValueError("Invalid span: %r" % ((start, end),))
        if not features.is_concrete():
            raise ValueError("Edge feature structures must be concrete.")
        if components is not None:
            components = tuple(components)
            if not components:
                raise ValueError("At least one component must be provided for a non-leaf edge.")
            position = start
            for component in components:
                if component.start != position:
                    raise ValueError("Discontinuity in component coverage.")
                position = component.end
            if position != end:
                raise ValueError("Components do not cover the edge's span.")
        self._start = start
        self._end = end
        self._category = category
        self._features = features
        self._rule = rule
        self._components = components
        self._bindings = FeatureStructure() if bindings is None else bindings
        self._hash = (hash((start, end, category)) ^ (hash(features) * 3) ^ (hash(rule) * 5) ^
                      (hash(components) * 2))

    @classmethod
    def for_word(cls, tokens: Tuple[str, ...], index: int) -> 'Edge':
        """Make a leaf edge for a word appearing literally in a rule."""
        return cls(index, index + 1, tokens[index], FeatureStructure())

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: 'Edge') -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return self is other or (self._hash == other._hash and
                                 self.span == other.span and
                                 self._category == other._category and
                                 self._features == other._features and
                                 self._rule == other._rule and
                                 self._components == other._components)

    def __ne__(self, other: 'Edge') -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        return not self == other

    def __repr__(self) -> str:
        return '<%s %s%s %r>' % (type(self).__name__, self._category, self._features, self.span)

    @property
    def start(self) -> int:
        return self._start

    @property
    def end(self) -> int:
        return self._end

    @property
    def span(self) -> Tuple[int, int]:
        """The start and end token indices of the phrase covered by this edge."""
        return self._start, self._end

    @property
    def category(self) -> str:
        return self._category

    @property
    def features(self) -> FeatureStructure:
        return self._features

    @property
    def rule(self) -> Union[Rule, LexicalEntry, None]:
        """The rule or lexical entry that produced this edge, if any."""
        return self._rule

    @property
    def components(self) -> Tuple['EdgeSet', ...]:
        """The edge sets this edge was built from."""
        return self._components or ()

    @property
    def bindings(self) -> FeatureStructure:
        """The values the rule's coreference tags were bound to, keyed by tag name."""
        return self._bindings

    @property
    def word(self) -> Optional[str]:
        """The word covered by a leaf edge."""
        if not self.is_leaf():
            return None
        if isinstance(self._rule, LexicalEntry):
            return self._rule.word
        return self._category

    @property
    def coverage(self) -> int:
        """The number of distinct derivations rooted at this edge."""
        return 1 if self.is_leaf() else reduce(lambda a, b: a * b.coverage, self.components, 1)

    def is_leaf(self) -> bool:
        return self._components is None

    def depends_on(self, edge_set: 'EdgeSet') -> bool:
        """Return whether the edge set appears among this edge's descendants. Only components
        over the same span are searched, since those are the only ones that can lead back to
        an edge set covering this edge's span."""
        for component in self.components:
            if component.span != self.span:
                continue
            if component is edge_set:
                return True
            if any(edge.depends_on(edge_set) for edge in component):
                return True
        return False


class EdgeSet:
    """The edges over the same span that share the same nonterminal and feature structure. The
    first edge added is the one used when a single derivation is requested."""

    def __init__(self, edge: Edge):
        self._edges = [edge]  # type: List[Edge]

    def __repr__(self) -> str:
        return '<%s %s%s %r: %d edges>' % (type(self).__name__, self.category, self.features,
                                           self.span, len(self._edges))

    def __iter__(self) -> Iterator[Edge]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __contains__(self, edge: Edge) -> bool:
        return edge in self._edges

    def add(self, edge: Edge) -> bool:
        """Add an edge to the set, returning whether it was new. Edges that would make the set
        one of its own descendants are refused."""
        first = self._edges[0]
        if edge.span != first.span or edge.category != first.category or \
                edge.features != first.features:
            raise ValueError("Edge %r does not belong in %r." % (edge, self))
        if edge in self._edges or edge.depends_on(self):
            return False
        self._edges.append(edge)
        return True

    @property
    def best_edge(self) -> Edge:
        return self._edges[0]

    @property
    def start(self) -> int:
        return self._edges[0].start

    @property
    def end(self) -> int:
        return self._edges[0].end

    @property
    def span(self) -> Tuple[int, int]:
        return self._edges[0].span

    @property
    def category(self) -> str:
        return self._edges[0].category

    @property
    def features(self) -> FeatureStructure:
        return self._edges[0].features

    @property
    def coverage(self) -> int:
        """The number of distinct derivations of the edges in this set."""
        return sum(edge.coverage for edge in self._edges)

    def get_derivation(self) -> 'Derivation':
        """Return the derivation obtained by following the first edge of every set."""
        return Derivation.from_edge(self.best_edge)

    def iter_derivations(self) -> Iterator['Derivation']:
        """Iterate over every derivation of every edge in this set."""
        for edge in self._edges:
            yield from Derivation.iter_from_edge(edge)


class Derivation:
    """A single derivation tree, spelled out from the chart."""

    def __init__(self, edge: Edge, children: Tuple['Derivation', ...] = ()):
        self._edge = edge
        self._children = tuple(children)
        if len(self._children) != len(edge.components):
            raise ValueError("Expected %d children, got %d." % (len(edge.components),
                                                                 len(self._children)))

    @classmethod
    def from_edge(cls, edge: Edge) -> 'Derivation':
        return cls(edge, tuple(cls.from_edge(component.best_edge)
                               for component in edge.components))

    @classmethod
    def iter_from_edge(cls, edge: Edge) -> Iterator['Derivation']:
        if edge.is_leaf():
            yield cls(edge)
            return
        alternatives = [list(component.iter_derivations()) for component in edge.components]
        for children in iter_combinations(alternatives):
            yield cls(edge, tuple(children))

    def __str__(self) -> str:
        return self.to_str()

    def __repr__(self) -> str:
        return '<%s %s %r>' % (type(self).__name__, self.category, self.span)

    def __eq__(self, other: 'Derivation') -> bool:
        if not isinstance(other, Derivation):
            return NotImplemented
        return self._edge == other._edge and self._children == other._children

    def __ne__(self, other: 'Derivation') -> bool:
        if not isinstance(other, Derivation):
            return NotImplemented
        return not self == other

    def __hash__(self) -> int:
        return hash(self._edge) ^ hash(self._children)

    @property
    def edge(self) -> Edge:
        return self._edge

    @property
    def children(self) -> Tuple['Derivation', ...]:
        return self._children

    @property
    def category(self) -> str:
        return self._edge.category

    @property
    def features(self) -> FeatureStructure:
        return self._edge.features

    @property
    def span(self) -> Tuple[int, int]:
        return self._edge.span

    @property
    def rule(self) -> Union[Rule, LexicalEntry, None]:
        return self._edge.rule

    @property
    def bindings(self) -> FeatureStructure:
        return self._edge.bindings

    @property
    def words(self) -> Tuple[str, ...]:
        """The words covered by this derivation, from left to right."""
        if self.is_leaf():
            return self._edge.word,
        return sum((child.words for child in self._children), ())

    def is_leaf(self) -> bool:
        return self._edge.is_leaf()

    def to_str(self, simplify: bool = False) -> str:
        """Generate an indented string representation of the derivation tree."""
        result = self.category
        if self.features:
            result += str(self.features)
        result += ':'
        if self.is_leaf():
            result += ' ' + repr(' '.join(self.words)) + ' ' + repr(self.span)
        elif len(self._children) == 1 and simplify:
            result += ' ' + self._children[0].to_str(simplify)
        else:
            if not simplify:
                result += ' [' + str(self.rule) + ']'
            for child in self._children:
                result += '\n    ' + child.to_str(simplify).replace('\n', '\n    ')
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert the derivation to plain, JSON-compatible data."""
        return {
            'category': self.category,
            'span': list(self.span),
            'features': self.features.to_dict(),
            'rule': None if self.rule is None else str(self.rule),
            'bindings': self.bindings.to_dict(),
            'words': list(self.words),
            'children': [child.to_dict() for child in self._children],
        }
