# -*- coding: utf-8 -*-

"""
A parser model, consisting of a set of grammar rules and a lexicon.
"""

import logging
from typing import FrozenSet, Optional, Iterable, Tuple, Dict, List

from featurechart.config import ModelConfig, Language
from featurechart.exceptions import GrammarModelError
from featurechart.features import FeatureTemplate
from featurechart.rules import Rule, LexicalEntry, RuleTerm, is_nonterminal_name

__author__ = 'Aaron Hosford'
__version__ = '1.0.0'
__all__ = [
    '__author__',
    '__version__',
    'Model',
]


LOGGER = logging.getLogger(__name__)


class Model:
    """
    A parser model, consisting of a set of grammar rules and a lexicon.

    The model is validated when it is constructed and never changes afterwards, so a single model
    can be shared by any number of concurrent parses. If no start symbol is given, the left-hand
    side of the first rule is used.
    """

    def __init__(self, rules: Iterable[Rule], lexical_entries: Iterable[LexicalEntry] = (),
                 start: str = None, language: Language = None, config_info: ModelConfig = None):
        self._rules = tuple(rules)
        self._lexical_entries = tuple(lexical_entries)
        for rule in self._rules:
            if not isinstance(rule, Rule):
                raise GrammarModelError("Not a rule: %r" % (rule,))
        for entry in self._lexical_entries:
            if not isinstance(entry, LexicalEntry):
                raise GrammarModelError("Not a lexical entry: %r" % (entry,))
        self._language = language
        self._config_info = config_info

        if start is None:
            if self._rules:
                start = self._rules[0].category
            elif self._lexical_entries:
                start = self._lexical_entries[0].category
        self._start = start

        self._rules_by_category = {}  # type: Dict[str, Tuple[Rule, ...]]
        self._unary_rules_by_child = {}  # type: Dict[str, Tuple[Rule, ...]]
        self._lexicon = {}  # type: Dict[str, Tuple[LexicalEntry, ...]]

        rules_by_category = {}  # type: Dict[str, List[Rule]]
        unary_rules_by_child = {}  # type: Dict[str, List[Rule]]
        for rule in self._rules:
            rules_by_category.setdefault(rule.category, []).append(rule)
            if rule.arity == 1:
                unary_rules_by_child.setdefault(rule.terms[0].symbol, []).append(rule)

        lexicon = {}  # type: Dict[str, List[LexicalEntry]]
        for entry in self._lexical_entries:
            entries = lexicon.setdefault(entry.word, [])
            if entry in entries:
                LOGGER.warning("Duplicate lexical entry ignored: %s", entry)
            else:
                entries.append(entry)

        self._rules_by_category = {category: tuple(rules)
                                   for category, rules in rules_by_category.items()}
        self._unary_rules_by_child = {category: tuple(rules)
                                      for category, rules in unary_rules_by_child.items()}
        self._lexicon = {word: tuple(entries) for word, entries in lexicon.items()}
        self._branch_rules = tuple(rule for rule in self._rules if rule.arity > 1)
        self._nonterminals = frozenset(
            [rule.category for rule in self._rules] +
            [entry.category for entry in self._lexical_entries]
        )
        self._terminals = frozenset(term.symbol for rule in self._rules for term in rule.terms
                                    if term.terminal)
        self._max_arity = max((rule.arity for rule in self._rules), default=0)

        self.validate()

    def validate(self) -> None:
        """Verify that the model is internally consistent, raising a GrammarModelError if not."""
        if not self._rules and not self._lexical_entries:
            raise GrammarModelError("The grammar has no rules.")
        if not isinstance(self._start, str) or self._start not in self._nonterminals:
            raise GrammarModelError("Unknown start symbol: %r" % (self._start,))
        for rule in self._rules:
            self._validate_rule(rule)
        for entry in self._lexical_entries:
            if not is_nonterminal_name(entry.category):
                raise GrammarModelError("Lexical entry for a terminal symbol: %s" % entry)
            if not entry.features.is_concrete():
                raise GrammarModelError("Lexical entry with variable features: %s" % entry)

    def _validate_rule(self, rule: Rule) -> None:
        if not is_nonterminal_name(rule.category):
            raise GrammarModelError("Rule for a terminal symbol: %s" % rule)
        if not rule.terms:
            raise GrammarModelError("Rule with an empty right-hand side: %s" % rule)
        if not isinstance(rule.template, FeatureTemplate):
            raise GrammarModelError("Malformed template in rule: %s" % rule)
        for term in rule.terms:
            if not isinstance(term, RuleTerm) or not isinstance(term.template, FeatureTemplate):
                raise GrammarModelError("Malformed term in rule: %s" % rule)
            if term.terminal:
                if term.template:
                    raise GrammarModelError("Terminal %r cannot have features in rule: %s" %
                                            (term.symbol, rule))
            elif term.symbol not in self._nonterminals:
                raise GrammarModelError("Unknown nonterminal %r referenced in rule: %s" %
                                        (term.symbol, rule))

    @property
    def start(self) -> str:
        """The nonterminal that must span the whole input for it to be accepted."""
        return self._start

    @property
    def rules(self) -> Tuple[Rule, ...]:
        """All rules of the model, in the order they were defined."""
        return self._rules

    @property
    def branch_rules(self) -> Tuple[Rule, ...]:
        """Rules combining two or more terms. Their children always cover shorter spans than the
        constituent they produce."""
        return self._branch_rules

    @property
    def lexical_entries(self) -> Tuple[LexicalEntry, ...]:
        return self._lexical_entries

    @property
    def nonterminals(self) -> FrozenSet[str]:
        return self._nonterminals

    @property
    def terminals(self) -> FrozenSet[str]:
        """The words appearing literally in the right-hand sides of rules."""
        return self._terminals

    @property
    def max_arity(self) -> int:
        """The length of the longest right-hand side among the model's rules."""
        return self._max_arity

    @property
    def language(self) -> Optional[Language]:
        """Get the language this parser model is designed for, if indicated."""
        return self._language

    @property
    def config_info(self) -> Optional[ModelConfig]:
        """The configuration information for this model, if any."""
        return self._config_info

    def rules_for(self, category: str) -> Tuple[Rule, ...]:
        """Return the rules producing the given nonterminal, in definition order."""
        return self._rules_by_category.get(category, ())

    def unary_rules_for(self, symbol: str) -> Tuple[Rule, ...]:
        """Return the single-term rules whose only term is the given symbol, which may be a
        nonterminal or a word."""
        return self._unary_rules_by_child.get(symbol, ())

    def lexicon_for(self, word: str) -> Tuple[LexicalEntry, ...]:
        """Return the distinct lexical entries for the given word, in definition order."""
        return self._lexicon.get(word, ())

    def is_known_word(self, word: str) -> bool:
        """Return whether the word has a lexical entry or appears literally in some rule."""
        return word in self._lexicon or word in self._terminals

    def __str__(self) -> str:
        lines = ['// start: ' + self._start]
        lines.extend(str(rule) for rule in self._rules)
        lines.extend(str(entry) for entry in self._lexical_entries)
        return '\n'.join(lines)
