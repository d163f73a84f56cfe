# -*- coding: utf-8 -*-

"""
Grammar rules and lexical entries.
"""

from sys import intern
from typing import Iterable, Tuple, FrozenSet

from featurechart.features import FeatureTemplate, FeatureStructure

__author__ = 'Aaron Hosford'
__all__ = [
    'is_nonterminal_name',
    'RuleTerm',
    'Rule',
    'LexicalEntry',
]


def is_nonterminal_name(symbol: str) -> bool:
    """Nonterminal names start with an upper case letter. Anything else names a terminal word."""
    return symbol[:1].isupper()


class RuleTerm:
    """One symbol on the right-hand side of a rule, together with its feature template."""

    def __init__(self, symbol: str, template: FeatureTemplate = None, terminal: bool = None):
        if not isinstance(symbol, str):
            raise TypeError(symbol, str)
        if not symbol:
            raise ValueError("Rule terms must have a symbol.")
        if template is None:
            template = FeatureTemplate()
        elif not isinstance(template, FeatureTemplate):
            template = FeatureTemplate(template)
        if terminal is None:
            terminal = not is_nonterminal_name(symbol)
        self._symbol = intern(symbol)
        self._template = template
        self._terminal = bool(terminal)
        self._hash = hash(self._symbol) ^ hash(self._template) ^ hash(self._terminal)

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def template(self) -> FeatureTemplate:
        return self._template

    @property
    def terminal(self) -> bool:
        """Whether the term matches a literal word rather than a constituent."""
        return self._terminal

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: 'RuleTerm') -> bool:
        if not isinstance(other, RuleTerm):
            return NotImplemented
        return self is other or (self._hash == other._hash and self._symbol == other._symbol and
                                 self._terminal == other._terminal and
                                 self._template == other._template)

    def __ne__(self, other: 'RuleTerm') -> bool:
        if not isinstance(other, RuleTerm):
            return NotImplemented
        return not self == other

    def __str__(self) -> str:
        if self._template:
            return self._symbol + str(self._template)
        return self._symbol

    def __repr__(self) -> str:
        return type(self).__name__ + repr((self._symbol, self._template, self._terminal))


class Rule:
    """A context-free rule annotated with feature templates. The left-hand side template and the
    right-hand side templates may share coreference tags."""

    def __init__(self, category: str, template: FeatureTemplate, terms: Iterable[RuleTerm]):
        if not isinstance(category, str):
            raise TypeError(category, str)
        if template is None:
            template = FeatureTemplate()
        elif not isinstance(template, FeatureTemplate):
            template = FeatureTemplate(template)
        self._category = intern(category)
        self._template = template
        self._terms = tuple(term if isinstance(term, RuleTerm) else RuleTerm(term)
                            for term in terms)
        self._hash = hash(self._category) ^ hash(self._template) ^ hash(self._terms)

    @property
    def category(self) -> str:
        """The nonterminal produced by this rule."""
        return self._category

    @property
    def template(self) -> FeatureTemplate:
        """The feature template of the produced nonterminal."""
        return self._template

    @property
    def terms(self) -> Tuple[RuleTerm, ...]:
        """The symbols that must appear consecutively to satisfy this rule."""
        return self._terms

    @property
    def arity(self) -> int:
        return len(self._terms)

    @property
    def references(self) -> FrozenSet[str]:
        """The nonterminals referred to by the right-hand side."""
        return frozenset(term.symbol for term in self._terms if not term.terminal)

    @property
    def tags(self) -> FrozenSet[str]:
        """All coreference tags used anywhere in the rule."""
        tags = set(self._template.tags)
        for term in self._terms:
            tags |= term.template.tags
        return frozenset(tags)

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: 'Rule') -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self is other or (self._hash == other._hash and
                                 self._category == other._category and
                                 self._template == other._template and
                                 self._terms == other._terms)

    def __ne__(self, other: 'Rule') -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return not self == other

    def __str__(self) -> str:
        result = self._category
        if self._template:
            result += str(self._template)
        result += ' ->'
        for term in self._terms:
            result += ' ' + str(term)
        return result

    def __repr__(self) -> str:
        return (type(self).__name__ + "(" + repr(self._category) + ", " + repr(self._template) +
                ", " + repr(list(self._terms)) + ")")


class LexicalEntry:
    """Assigns a nonterminal and a concrete feature structure to a word."""

    def __init__(self, word: str, category: str, features: FeatureStructure = None):
        if not isinstance(word, str):
            raise TypeError(word, str)
        if not isinstance(category, str):
            raise TypeError(category, str)
        if features is None:
            features = FeatureStructure()
        elif not isinstance(features, FeatureStructure):
            features = FeatureStructure(features)
        self._word = intern(word)
        self._category = intern(category)
        self._features = features
        self._hash = hash(self._word) ^ hash(self._category) ^ hash(self._features)

    @property
    def word(self) -> str:
        return self._word

    @property
    def category(self) -> str:
        return self._category

    @property
    def features(self) -> FeatureStructure:
        return self._features

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: 'LexicalEntry') -> bool:
        if not isinstance(other, LexicalEntry):
            return NotImplemented
        return self is other or (self._hash == other._hash and self._word == other._word and
                                 self._category == other._category and
                                 self._features == other._features)

    def __ne__(self, other: 'LexicalEntry') -> bool:
        if not isinstance(other, LexicalEntry):
            return NotImplemented
        return not self == other

    def __str__(self) -> str:
        result = self._category
        if self._features:
            result += str(self._features)
        return result + ' -> ' + self._word

    def __repr__(self) -> str:
        return type(self).__name__ + repr((self._word, self._category, self._features))
