# -*- coding: utf-8 -*-

"""
The outcome of parsing a single input.
"""

import itertools
from typing import Tuple, Optional, Iterator, List, Dict, Any

from featurechart.chart import Chart
from featurechart.features import FeatureStructure
from featurechart.trees import EdgeSet, Derivation

__author__ = 'Aaron Hosford'
__all__ = [
    'ParseResult',
]


class ParseResult:
    """
    The outcome of parsing a single input.

    The input is accepted if an edge for the start symbol covers it entirely. Every distinct
    feature structure found for the start symbol over the whole input is a reading; the first one
    found is the result's feature structure. When the input is rejected, the underivable spans, the
    empty spans, and the unknown tokens indicate where the input failed to combine.
    """

    def __init__(self, tokens: Tuple[str, ...], chart: Chart, start: str,
                 unknown_tokens: Tuple[int, ...] = ()):
        self._tokens = tuple(tokens)
        self._chart = chart
        self._start = start
        self._unknown_tokens = tuple(unknown_tokens)
        if self._tokens:
            self._roots = chart.get_edge_sets(0, len(self._tokens), start)
        else:
            self._roots = ()

    def __bool__(self) -> bool:
        return self.accepted

    def __repr__(self) -> str:
        return '<%s %r: %s>' % (type(self).__name__, ' '.join(self._tokens),
                                'accepted' if self.accepted else 'rejected')

    def __str__(self) -> str:
        if not self.accepted:
            return 'Rejected: %s' % ' '.join(self._tokens)
        return str(self.derivation)

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    @property
    def chart(self) -> Chart:
        """The chart the parser built for the input, for inspection."""
        return self._chart

    @property
    def start(self) -> str:
        return self._start

    @property
    def accepted(self) -> bool:
        return bool(self._roots)

    @property
    def roots(self) -> Tuple[EdgeSet, ...]:
        """The start symbol's edge sets covering the entire input."""
        return self._roots

    @property
    def readings(self) -> Tuple[FeatureStructure, ...]:
        """The distinct feature structures of the start symbol over the entire input, in the
        order they were found."""
        return tuple(edge_set.features for edge_set in self._roots)

    @property
    def feature_structure(self) -> Optional[FeatureStructure]:
        if not self._roots:
            return None
        return self._roots[0].features

    @property
    def derivation(self) -> Optional[Derivation]:
        if not self._roots:
            return None
        return self._roots[0].get_derivation()

    @property
    def unknown_tokens(self) -> Tuple[int, ...]:
        """The indices of tokens that have no lexical entry and appear in no rule."""
        return self._unknown_tokens

    @property
    def empty_spans(self) -> List[Tuple[int, int]]:
        """The maximal runs of tokens over which no nonterminal could be derived."""
        return self._chart.empty_spans()

    @property
    def underivable_spans(self) -> List[Tuple[int, int]]:
        """Every span of the input over which no nonterminal could be derived. For an input whose
        words are all known, these show where constituents failed to agree."""
        return self._chart.underivable_spans()

    @property
    def derivation_count(self) -> int:
        return sum(edge_set.coverage for edge_set in self._roots)

    def iter_derivations(self, limit: int = None) -> Iterator[Derivation]:
        """Iterate over the derivations of every reading, optionally stopping after the given
        number of them."""
        derivations = itertools.chain.from_iterable(edge_set.iter_derivations()
                                                    for edge_set in self._roots)
        if limit is not None:
            derivations = itertools.islice(derivations, limit)
        return derivations

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to plain, JSON-compatible data."""
        return {
            'accepted': self.accepted,
            'feature_structure': (None if self.feature_structure is None
                                  else self.feature_structure.to_dict()),
            'derivation': None if self.derivation is None else self.derivation.to_dict(),
        }
