# -*- coding: utf-8 -*-

from typing import Tuple, Iterator, Dict, Optional, List

from sortedcontainers import SortedDict, SortedSet

from featurechart.features import FeatureStructure
from featurechart.trees import Edge, EdgeSet

__author__ = 'Aaron Hosford'
__all__ = [
    'Chart',
]


class Chart:
    """The chart tracked & used by a parser state. This data structure holds a mapping from spans
    of the input to the nonterminals and edges found over them. The data is structured to minimize
    query & update time during the parser's search: edge sets are looked up by span, then by
    nonterminal, then by feature structure."""

    def __init__(self, tokens: Tuple[str, ...]):
        self._tokens = tuple(tokens)
        self._map = SortedDict()  # type: SortedDict
        self._size = 0
        self._edge_count = 0

    def __iter__(self) -> Iterator[EdgeSet]:
        """Iterate over every edge set, ordered by span and then by insertion."""
        for category_map in self._map.values():
            for structure_map in category_map.values():
                yield from structure_map.values()

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return '<%s %r: %d edge sets, %d edges>' % (type(self).__name__, ' '.join(self._tokens),
                                                    self._size, self._edge_count)

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    @property
    def size(self) -> int:
        """The number of edge sets in the chart."""
        return self._size

    @property
    def edge_count(self) -> int:
        """The number of distinct edges in the chart."""
        return self._edge_count

    def add(self, edge: Edge) -> Tuple[bool, EdgeSet]:
        """Add the given edge to the chart. Return a boolean indicating whether it was something
        new rather than an edge the chart already held, together with the edge set it belongs to.
        An edge whose span, nonterminal, and feature structure were already known is added to the
        existing edge set but is not new."""
        if edge.end > len(self._tokens):
            raise ValueError("Edge %r extends beyond the end of the input." % (edge,))

        category_map = self._map.get(edge.span)
        if category_map is None:
            category_map = self._map[edge.span] = {}
        structure_map = category_map.get(edge.category)
        if structure_map is None:
            structure_map = category_map[edge.category] = {}
        edge_set = structure_map.get(edge.features)
        if edge_set is None:
            edge_set = structure_map[edge.features] = EdgeSet(edge)
            self._size += 1
            self._edge_count += 1
            return True, edge_set

        # No new edge sets were added, so nothing downstream can change.
        if edge_set.add(edge):
            self._edge_count += 1
        return False, edge_set

    def get_edge_set(self, start: int, end: int, category: str,
                     features: FeatureStructure) -> Optional[EdgeSet]:
        category_map = self._map.get((start, end))
        if category_map is None:
            return None
        structure_map = category_map.get(category)
        if structure_map is None:
            return None
        return structure_map.get(features)

    def get_edge_sets(self, start: int, end: int, category: str) -> Tuple[EdgeSet, ...]:
        """Return the edge sets for the given nonterminal over the given span, in the order they
        were found."""
        category_map = self._map.get((start, end))
        if category_map is None:
            return ()
        structure_map = category_map.get(category)
        if structure_map is None:
            return ()
        return tuple(structure_map.values())

    def iter_edge_sets(self, start: int, end: int) -> Iterator[EdgeSet]:
        category_map = self._map.get((start, end))
        if category_map is None:
            return
        for structure_map in category_map.values():
            yield from structure_map.values()

    def get_categories(self, start: int, end: int) -> Tuple[str, ...]:
        category_map = self._map.get((start, end))
        if category_map is None:
            return ()
        return tuple(category_map)

    def has_range(self, start: int, end: int) -> bool:
        return (start, end) in self._map

    def iter_spans(self) -> Iterator[Tuple[int, int]]:
        """Iterate over the spans holding at least one edge set, in order."""
        return iter(self._map)

    def covered_positions(self) -> SortedSet:
        """The indices of the tokens covered by at least one edge set."""
        covered = SortedSet()
        for start, end in self._map:
            covered.update(range(start, end))
        return covered

    def empty_spans(self) -> List[Tuple[int, int]]:
        """Return the maximal runs of consecutive tokens that no edge set covers."""
        covered = self.covered_positions()
        spans = []  # type: List[Tuple[int, int]]
        start = None
        for index in range(len(self._tokens)):
            if index in covered:
                if start is not None:
                    spans.append((start, index))
                    start = None
            elif start is None:
                start = index
        if start is not None:
            spans.append((start, len(self._tokens)))
        return spans

    def underivable_spans(self) -> List[Tuple[int, int]]:
        """Return every span of the input over which no nonterminal could be derived, ordered by
        start and then by end."""
        length = len(self._tokens)
        return [(start, end)
                for start in range(length)
                for end in range(start + 1, length + 1)
                if (start, end) not in self._map]

    def summarize(self) -> Dict[Tuple[int, int], int]:
        """Return the number of edge sets found over each span."""
        return {span: sum(len(structure_map) for structure_map in category_map.values())
                for span, category_map in self._map.items()}
