# -*- coding: utf-8 -*-

"""
Parsing of grammar files

A grammar file holds one rule per line:

    S[ tense: #t ] -> N[ case: nom, num: #n ] IV[ num: #n, tense: #t ]
    IV[ num: **top**, tense: past ] -> fell

A long rule may be wrapped: a line without ``->`` continues the rule before it, unless that rule
was closed with ``;``.

Symbols starting with an upper case letter are nonterminals; anything else is a literal word.
Feature values are atoms, the wildcard ``**top**``, coreference tags (``#n``), or tags carrying an
initial value (``#n sg``). A rule whose right-hand side is a single word is a lexical entry. Text
following ``//`` is a comment, and a trailing ``;`` is allowed.
"""

import re
from typing import Tuple, List, Iterable, Iterator, Optional

from featurechart.exceptions import GrammarParserError, GrammarSyntaxError, UnificationConflict
from featurechart.features import TOP, TOP_STR, Atom, Tag, FeatureTemplate, VariableStore, \
    instantiate, realize
from featurechart.model import Model
from featurechart.rules import Rule, RuleTerm, LexicalEntry, is_nonterminal_name

__author__ = 'Aaron Hosford'
__all__ = [
    'GrammarSyntaxError',
    'GrammarParserError',
    'GrammarParser',
]


NAME_PATTERN = re.compile(r'[a-zA-Z0-9\-_]+')
SYMBOL_PATTERN = re.compile(r'[a-zA-Z0-9\-_\']+')
VALUE_PATTERN = re.compile(r'[a-zA-Z0-9\-_*]+')


class GrammarParser:
    """Parsing of grammar files"""

    @staticmethod
    def parse_value(definition: str, offset: int = 1):
        """Parse a feature value: an atom, **top**, a tag, or a tag followed by a value."""
        definition = definition.strip()
        if not definition:
            raise GrammarSyntaxError("Expected: feature value", offset=offset)
        tag = None
        if definition.startswith('#'):
            parts = definition[1:].split(None, 1)
            if not parts:
                raise GrammarSyntaxError("Expected: tag name", offset=offset + 1)
            tag = parts[0]
            if not NAME_PATTERN.fullmatch(tag):
                raise GrammarSyntaxError("Unexpected: " + repr(tag), offset=offset + 1)
            if len(parts) == 1:
                return Tag(tag)
            offset += definition.find(parts[1], 1 + len(tag))
            definition = parts[1]
        if not VALUE_PATTERN.fullmatch(definition):
            raise GrammarSyntaxError("Unexpected: " + repr(definition), offset=offset)
        if definition == TOP_STR:
            value = TOP
        elif '*' in definition:
            raise GrammarSyntaxError("Unexpected: '*'", offset=offset + definition.find('*'))
        else:
            value = Atom(definition)
        if tag is None:
            return value
        return Tag(tag, value)

    def parse_feature_list(self, definition: str, offset: int = 1) -> FeatureTemplate:
        """Parse the bracketed feature list of a symbol, e.g. '[ case: nom, num: #1 ]'."""
        if not definition.startswith('['):
            raise GrammarSyntaxError("Expected: '['", offset=offset)
        if not definition.endswith(']'):
            raise GrammarSyntaxError("Expected: ']'", offset=offset + len(definition))
        body = definition[1:-1]
        offset += 1
        features = []
        seen = set()
        if not body.strip():
            return FeatureTemplate()
        items = body.split(',')
        if len(items) > 1 and not items[-1].strip():
            # A trailing comma is allowed.
            items.pop()
        for item in items:
            if not item.strip():
                raise GrammarSyntaxError("Unexpected: ','", offset=offset + len(item))
            if ':' not in item:
                raise GrammarSyntaxError("Expected: ':'", offset=offset + len(item.rstrip()))
            if item.count(':') > 1:
                raise GrammarSyntaxError("Unexpected: ':'",
                                         offset=offset + item.find(':', item.find(':') + 1))
            key, value = item.split(':')
            name = key.strip()
            if not NAME_PATTERN.fullmatch(name):
                raise GrammarSyntaxError("Expected: feature name",
                                         offset=offset + len(key) - len(key.lstrip()))
            if name in seen:
                raise GrammarSyntaxError("Unexpected: duplicate feature " + repr(name),
                                         offset=offset + key.find(name))
            seen.add(name)
            value_offset = offset + len(key) + 1 + len(value) - len(value.lstrip())
            features.append((name, self.parse_value(value, value_offset)))
            offset += len(item) + 1
        return FeatureTemplate(features)

    def parse_term(self, definition: str, offset: int = 1) -> Tuple[str, FeatureTemplate]:
        """Parse a symbol with its optional feature list."""
        definition = definition.strip()
        if '[' in definition:
            symbol, features = definition.split('[', 1)
            symbol = symbol.rstrip()
            template = self.parse_feature_list('[' + features,
                                               offset=offset + definition.find('['))
        else:
            if ']' in definition:
                raise GrammarSyntaxError("Unexpected: ']'", offset=offset + definition.find(']'))
            symbol = definition
            template = FeatureTemplate()
        if not symbol:
            raise GrammarSyntaxError("Expected: symbol", offset=offset)
        if not SYMBOL_PATTERN.fullmatch(symbol):
            raise GrammarSyntaxError("Unexpected: " + repr(symbol), offset=offset)
        return symbol, template

    @staticmethod
    def split_terms(definition: str, offset: int = 1) -> List[Tuple[str, int]]:
        """Split the right-hand side of a rule into its terms, keeping bracketed feature lists
        together with their symbols. Returns each term with its offset."""
        terms = []
        term = ''
        term_start = 0
        depth = 0
        for index, char in enumerate(definition):
            if char == '[':
                if depth:
                    raise GrammarSyntaxError("Unexpected: '['", offset=offset + index)
                depth += 1
            elif char == ']':
                if not depth:
                    raise GrammarSyntaxError("Unexpected: ']'", offset=offset + index)
                depth -= 1
                # A closed feature list always ends its term, even without white space after it.
                terms.append((term + char, offset + term_start))
                term = ''
                continue
            elif char.isspace() and not depth:
                # A feature list may be separated from its symbol by white space.
                rest = definition[index:].lstrip()
                if not term or rest.startswith('['):
                    continue
                terms.append((term, offset + term_start))
                term = ''
                continue
            if not term:
                term_start = index
            term += char
        if depth:
            raise GrammarSyntaxError("Expected: ']'", offset=offset + len(definition))
        if term:
            terms.append((term, offset + term_start))
        return terms

    def parse_rule(self, definition: str, offset: int = 1) -> Rule:
        """Parse a single rule, e.g. 'S -> N[ case: nom ] IV'."""
        if '->' not in definition:
            raise GrammarSyntaxError("Expected: '->'", offset=offset + len(definition))
        if definition.count('->') > 1:
            raise GrammarSyntaxError("Unexpected: '->'",
                                     offset=offset + definition.find('->',
                                                                     definition.find('->') + 1))
        head, body = definition.split('->')
        category, template = self.parse_term(head, offset + len(head) - len(head.lstrip()))
        if not is_nonterminal_name(category):
            raise GrammarSyntaxError("Expected: nonterminal", offset=offset)
        body_offset = offset + len(head) + 2
        terms = []
        for term_definition, term_offset in self.split_terms(body, body_offset):
            symbol, term_template = self.parse_term(term_definition, term_offset)
            if term_template and not is_nonterminal_name(symbol):
                raise GrammarSyntaxError("Unexpected: features on terminal " + repr(symbol),
                                         offset=term_offset + len(symbol))
            terms.append(RuleTerm(symbol, term_template))
        if not terms:
            raise GrammarSyntaxError("Expected: symbol", offset=body_offset + len(body))
        return Rule(category, template, terms)

    @staticmethod
    def to_lexical_entry(rule: Rule) -> Optional[LexicalEntry]:
        """If the rule rewrites a nonterminal as a single word, return the equivalent lexical
        entry. Tags in a lexical rule have nothing to corefer with, so they resolve to **top**."""
        if rule.arity != 1 or not rule.terms[0].terminal:
            return None
        store = VariableStore()
        try:
            features = realize(instantiate(rule.template, store), store)
        except UnificationConflict as conflict:
            raise GrammarSyntaxError("Unexpected: conflicting tag values (%s)" % conflict) \
                from conflict
        return LexicalEntry(rule.terms[0].symbol, rule.category, features)

    @staticmethod
    def iter_rule_definitions(lines: Iterable[str]) -> Iterator[Tuple[int, str, str]]:
        """Group the lines of a grammar file into rule definitions, with comments and the closing
        ';' removed. A line without '->' continues the rule before it, unless that rule was closed
        with ';'. Yields the line number where each rule starts, its definition, and its raw
        text."""
        line_number = None
        definition = None
        raw_lines = []  # type: List[str]
        closed = True
        for index, raw_line in enumerate(lines):
            line = raw_line.split('//')[0].rstrip()
            ends_rule = line.endswith(';')
            if ends_rule:
                line = line[:-1].rstrip()
            if not line.strip():
                if ends_rule:
                    closed = True
                continue
            if definition is not None and not closed and '->' not in line:
                definition += ' ' + line.strip()
                raw_lines.append(raw_line)
                closed = ends_rule
                continue
            if definition is not None:
                yield line_number, definition, GrammarParser._join_raw_lines(raw_lines)
            line_number = index + 1
            definition = line
            raw_lines = [raw_line]
            closed = ends_rule
        if definition is not None:
            yield line_number, definition, GrammarParser._join_raw_lines(raw_lines)

    @staticmethod
    def _join_raw_lines(raw_lines: List[str]) -> str:
        if len(raw_lines) == 1:
            return raw_lines[0]
        return '\n'.join(raw_line.rstrip('\r\n') for raw_line in raw_lines)

    def parse_grammar_definition_file(self, lines: Iterable[str], filename: str = None) \
            -> Tuple[List[Rule], List[LexicalEntry]]:
        """Parse the lines of a grammar file, returning its rules and its lexical entries."""
        rules = []
        lexical_entries = []
        for line_number, line, raw_text in self.iter_rule_definitions(lines):
            try:
                offset = 1 + len(line) - len(line.lstrip())
                rule = self.parse_rule(line.strip(), offset)
                entry = self.to_lexical_entry(rule)
                if entry is None:
                    rules.append(rule)
                else:
                    lexical_entries.append(entry)
            except GrammarParserError as error:
                error.set_info(filename=filename, lineno=line_number, text=raw_text)
                raise error
            except Exception as original_exception:
                raise GrammarParserError(filename=filename,
                                         lineno=line_number, text=raw_text) from original_exception
        return rules, lexical_entries

    def parse_model(self, text: str, start: str = None, filename: str = None) -> Model:
        """Parse the text of a grammar file and build a validated model from it."""
        rules, lexical_entries = self.parse_grammar_definition_file(text.splitlines(), filename)
        return Model(rules, lexical_entries, start)
