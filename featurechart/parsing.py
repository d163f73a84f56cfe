# -*- coding: utf-8 -*-

import logging
import time
from sys import intern
from typing import Sequence, Tuple, Optional, List, Dict

from featurechart.chart import Chart
from featurechart.exceptions import Timeout, UnificationConflict
from featurechart.features import FeatureStructure, VariableStore, instantiate, realize, unify
from featurechart.model import Model
from featurechart.results import ParseResult
from featurechart.rules import Rule, RuleTerm
from featurechart.trees import Edge, EdgeSet
from featurechart.utility import iter_combinations, iter_partitions

__author__ = 'Aaron Hosford'
__all__ = [
    'ParserState',
    'ParsingAlgorithm',
    'Parser',
]


LOGGER = logging.getLogger(__name__)


class ParserState:
    """The state of the parser as parsing proceeds. A parser state is built for exactly one input
    and is never shared between parses."""

    def __init__(self, model: Model, tokens: Sequence[str], case_sensitive: bool = True):
        if not isinstance(model, Model):
            raise TypeError(model, Model)
        if isinstance(tokens, str):
            raise TypeError("Expected a sequence of tokens, not a string: %r" % (tokens,))
        self._model = model
        self._tokens = tuple(intern(str(token)) for token in tokens)
        if case_sensitive:
            self._words = self._tokens
        else:
            self._words = tuple(intern(token.lower()) for token in self._tokens)
        self._chart = Chart(self._words)
        self._word_edge_sets = {}  # type: Dict[int, EdgeSet]
        self._unknown_tokens = tuple(index for index, word in enumerate(self._words)
                                     if not model.is_known_word(word))
        self._finished = False

    @property
    def model(self) -> Model:
        return self._model

    @property
    def tokens(self) -> Tuple[str, ...]:
        """The tokens as they were given."""
        return self._tokens

    @property
    def words(self) -> Tuple[str, ...]:
        """The tokens as they are looked up in the model."""
        return self._words

    @property
    def chart(self) -> Chart:
        return self._chart

    @property
    def unknown_tokens(self) -> Tuple[int, ...]:
        """The indices of tokens the model has never heard of."""
        return self._unknown_tokens

    @property
    def finished(self) -> bool:
        return self._finished

    def get_word_edge_set(self, index: int) -> EdgeSet:
        """Return the edge set standing for the word at the given position, as it appears
        literally in a rule."""
        edge_set = self._word_edge_sets.get(index)
        if edge_set is None:
            edge_set = self._word_edge_sets[index] = EdgeSet(Edge.for_word(self._words, index))
        return edge_set

    def get_candidates(self, term: RuleTerm, start: int, end: int) -> Tuple[EdgeSet, ...]:
        """Return the edge sets over the given span that the rule term can match."""
        if term.terminal:
            if end - start == 1 and self._words[start] == term.symbol:
                return self.get_word_edge_set(start),
            return ()
        return self._chart.get_edge_sets(start, end, term.symbol)

    def seed(self, index: int) -> List[EdgeSet]:
        """Add an edge for every lexical entry of the word at the given position. Returns the new
        edge sets."""
        added = []
        for entry in self._model.lexicon_for(self._words[index]):
            edge = Edge(index, index + 1, entry.category, entry.features, entry)
            is_new, edge_set = self._chart.add(edge)
            if is_new:
                added.append(edge_set)
        return added

    def process_span(self, start: int, end: int, deadline: float = None) -> None:
        """Find every edge over the given span. All shorter spans must already be processed."""
        if end - start == 1:
            agenda = self.seed(start)
            # The word itself may be the only term of a rule.
            agenda.append(self.get_word_edge_set(start))
        else:
            agenda = []
            for rule in self._model.branch_rules:
                if rule.arity > end - start:
                    continue
                if deadline is not None and time.time() >= deadline:
                    raise Timeout()
                agenda.extend(ParsingAlgorithm.apply_rule(self, rule, start, end))
        self.close_span(agenda, deadline)

    def close_span(self, agenda: List[EdgeSet], deadline: float = None) -> None:
        """Apply single-term rules to the agenda's edge sets until no new edge sets appear over
        their span."""
        while agenda:
            if deadline is not None and time.time() >= deadline:
                raise Timeout()
            edge_set = agenda.pop(0)
            is_word = edge_set.best_edge.rule is None and edge_set.best_edge.is_leaf()
            for rule in self._model.unary_rules_for(edge_set.category):
                if rule.terms[0].terminal != is_word:
                    continue
                edge = ParsingAlgorithm.combine(rule, (edge_set,), edge_set.start, edge_set.end)
                if edge is None:
                    continue
                is_new, new_edge_set = self._chart.add(edge)
                if is_new:
                    agenda.append(new_edge_set)

    def process_all_spans(self, deadline: float = None) -> None:
        """Fill the chart, shortest spans first."""
        length = len(self._words)
        for width in range(1, length + 1):
            for start in range(length - width + 1):
                self.process_span(start, start + width, deadline)
        self._finished = True
        LOGGER.debug("Chart for %r: %d edge sets, %d edges.", ' '.join(self._tokens),
                     self._chart.size, self._chart.edge_count)

    def get_result(self) -> ParseResult:
        return ParseResult(self._tokens, self._chart, self._model.start, self._unknown_tokens)


class ParsingAlgorithm:
    """Coordinates the search for constituents over the spans of an input, combining the edges of
    shorter spans into edges of longer ones by way of the model's rules."""

    @staticmethod
    def new_parser_state(model: Model, tokens: Sequence[str],
                         case_sensitive: bool = True) -> ParserState:
        """Return a new parser state for the given input."""
        return ParserState(model, tokens, case_sensitive)

    @staticmethod
    def combine(rule: Rule, components: Sequence[EdgeSet], start: int, end: int) -> Optional[Edge]:
        """
        Apply the rule to one choice of edge sets for its terms, returning the resulting edge, or
        None if their feature structures are incompatible with the rule.

        Each application gets its own variable store. The template of every term is unified with
        the feature structure of the edge set it matched, which binds the rule's coreference tags,
        and the template of the left-hand side is then realized from those bindings.
        """
        store = VariableStore()
        try:
            for term, component in zip(rule.terms, components):
                if not term.terminal:
                    unify(instantiate(term.template, store), component.features, store)
            features = realize(instantiate(rule.template, store), store)
        except UnificationConflict as conflict:
            LOGGER.debug("Pruned %s over %r: %s", rule, (start, end), conflict)
            return None
        return Edge(start, end, rule.category, features, rule, tuple(components),
                    FeatureStructure(store.bindings()))

    @staticmethod
    def apply_rule(state: ParserState, rule: Rule, start: int, end: int) -> List[EdgeSet]:
        """Apply the rule over every partition of the span and every combination of matching edge
        sets. Returns the new edge sets."""
        added = []
        for partition in iter_partitions(start, end, rule.arity):
            candidates = []
            for term, (term_start, term_end) in zip(rule.terms, partition):
                edge_sets = state.get_candidates(term, term_start, term_end)
                if not edge_sets:
                    break
                candidates.append(edge_sets)
            else:
                for components in iter_combinations(candidates):
                    edge = ParsingAlgorithm.combine(rule, components, start, end)
                    if edge is None:
                        continue
                    is_new, edge_set = state.chart.add(edge)
                    if is_new:
                        added.append(edge_set)
        return added

    @staticmethod
    def parse(parser_state: ParserState, deadline: float = None) -> ParseResult:
        """Parse the parser state's input, returning the results."""
        parser_state.process_all_spans(deadline)
        return parser_state.get_result()


class Parser:
    """
    Parses token sequences with a model.

    The parser keeps no state between calls, so one parser can serve any number of threads at
    once. The time limit, if given, is the default number of seconds a call to parse may take.
    """

    def __init__(self, model: Model, case_sensitive: bool = True, time_limit: float = None):
        if not isinstance(model, Model):
            raise TypeError(model, Model)
        if time_limit is not None and time_limit <= 0:
            raise ValueError("Time limit must be positive: %r" % (time_limit,))
        self._model = model
        self._case_sensitive = bool(case_sensitive)
        self._time_limit = time_limit

    @property
    def model(self) -> Model:
        return self._model

    @property
    def case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def time_limit(self) -> Optional[float]:
        return self._time_limit

    def parse(self, tokens: Sequence[str], timeout: float = None) -> ParseResult:
        """Parse a sequence of tokens. The timeout, if given, is the time.time() value after which
        the parse is abandoned by raising Timeout. Rejection of the input is a normal result, not
        an error."""
        if timeout is None and self._time_limit is not None:
            timeout = time.time() + self._time_limit
        state = ParsingAlgorithm.new_parser_state(self._model, tokens, self._case_sensitive)
        return ParsingAlgorithm.parse(state, timeout)

    def accepts(self, tokens: Sequence[str], timeout: float = None) -> bool:
        """Return whether the model's start symbol covers the entire input."""
        return self.parse(tokens, timeout).accepted
