import logging
import time
from concurrent.futures import ThreadPoolExecutor
from unittest import TestCase

from featurechart.exceptions import Timeout
from featurechart.features import Atom, FeatureStructure, TOP
from featurechart.grammar import GrammarParser
from featurechart.loader import ModelLoader, get_builtin_model_path
from featurechart.model import Model
from featurechart.parsing import Parser, ParserState, ParsingAlgorithm
from featurechart.rules import Rule, RuleTerm


def load_reflexives_parser():
    return ModelLoader(get_builtin_model_path('reflexives')).load_parser()


class TestReflexives(TestCase):

    @classmethod
    def setUpClass(cls):
        cls.parser = load_reflexives_parser()

    def parse(self, sentence):
        return self.parser.parse(sentence.split())

    def test_reflexive_agrees_with_subject(self):
        result = self.parse('he likes himself')
        self.assertTrue(result.accepted)
        self.assertEqual(result.feature_structure, FeatureStructure(tense='pres'))
        self.assertEqual(result.derivation.bindings['p'], Atom('he'))
        self.assertEqual(result.derivation.children[2].features['needs_pron'], Atom('he'))

    def test_reflexive_pronoun_mismatch(self):
        self.assertFalse(self.parse('he likes herself').accepted)

    def test_plural_reflexive(self):
        self.assertTrue(self.parse('they like themselves').accepted)

    def test_number_mismatch(self):
        self.assertFalse(self.parse('he like him').accepted)

    def test_names_bind_reflexives(self):
        self.assertTrue(self.parse('mary likes herself').accepted)
        self.assertFalse(self.parse('mary likes himself').accepted)

    def test_reflexives_are_bound_within_their_clause(self):
        result = self.parse('he said that she likes herself')
        self.assertTrue(result.accepted)
        self.assertEqual(result.feature_structure['tense'], Atom('past'))
        self.assertFalse(self.parse('he said that she likes himself').accepted)

    def test_case(self):
        self.assertTrue(self.parse('he likes him').accepted)
        self.assertFalse(self.parse('him likes he').accepted)

    def test_past_tense_agrees_with_any_number(self):
        for sentence in ('he fell', 'they fell', 'sue liked bill'):
            result = self.parse(sentence)
            self.assertTrue(result.accepted, sentence)
            self.assertEqual(result.feature_structure['tense'], Atom('past'))

    def test_case_insensitive_lookup(self):
        self.assertFalse(self.parser.case_sensitive)
        result = self.parse('Mary likes Sue')
        self.assertTrue(result.accepted)
        self.assertEqual(result.tokens, ('Mary', 'likes', 'Sue'))

    def test_four_term_rule(self):
        result = self.parse('mary says that bill says that they fall')
        self.assertTrue(result.accepted)
        derivation = result.derivation
        self.assertEqual(len(derivation.children), 4)
        self.assertEqual([child.category for child in derivation.children],
                         ['N', 'CV', 'Comp', 'S'])
        self.assertEqual(derivation.words, ('mary', 'says', 'that', 'bill', 'says', 'that', 'they',
                                            'fall'))

    def test_distinct_applications_do_not_alias(self):
        singular = self.parse('he falls')
        plural = self.parse('they fall')
        self.assertEqual(singular.derivation.bindings['n'], Atom('sg'))
        self.assertEqual(plural.derivation.bindings['n'], Atom('pl'))

        # Within one sentence, the same rule is applied to both clauses.
        result = self.parse('they say that he says that she falls')
        outer = result.derivation
        inner = outer.children[3]
        self.assertEqual(outer.rule, inner.rule)
        self.assertEqual(outer.bindings['n'], Atom('pl'))
        self.assertEqual(inner.bindings['n'], Atom('sg'))

    def test_rejection_is_not_an_error(self):
        result = self.parse('falls he')
        self.assertFalse(result.accepted)
        self.assertIsNone(result.feature_structure)
        self.assertIsNone(result.derivation)
        self.assertEqual(result.readings, ())
        self.assertEqual(list(result.iter_derivations()), [])
        self.assertEqual(result.to_dict(), {'accepted': False, 'feature_structure': None,
                                            'derivation': None})

    def test_empty_input_is_rejected(self):
        result = self.parser.parse([])
        self.assertFalse(result.accepted)
        self.assertEqual(result.empty_spans, [])

    def test_diagnostics(self):
        result = self.parse('he likes the cat')
        self.assertFalse(result.accepted)
        self.assertEqual(result.unknown_tokens, (2, 3))
        self.assertEqual(result.empty_spans, [(2, 4)])

    def test_agreement_failures_are_located(self):
        result = self.parse('he like him')
        self.assertFalse(result.accepted)
        self.assertEqual(result.unknown_tokens, ())
        self.assertEqual(result.empty_spans, [])
        self.assertEqual(result.underivable_spans, [(0, 2), (0, 3), (1, 3)])

        result = self.parse('he said that she likes himself')
        self.assertIn((3, 6), result.underivable_spans)
        self.assertNotIn((3, 4), result.underivable_spans)
        self.assertIn((0, 6), result.underivable_spans)

    def test_accepted_input_is_derivable(self):
        result = self.parse('he likes himself')
        self.assertNotIn((0, 3), result.underivable_spans)

    def test_to_dict(self):
        data = self.parse('he falls').to_dict()
        self.assertTrue(data['accepted'])
        self.assertEqual(data['feature_structure'], {'tense': 'pres'})
        self.assertEqual(data['derivation']['category'], 'S')
        self.assertEqual(data['derivation']['span'], [0, 2])
        self.assertEqual(data['derivation']['bindings'], {'t': 'pres', 'n': 'sg'})
        self.assertEqual([child['words'] for child in data['derivation']['children']],
                         [['he'], ['falls']])

    def test_derivation_str(self):
        text = str(self.parse('he falls').derivation)
        self.assertTrue(text.startswith('S[ tense: pres ]: [S[ tense: #t ] -> '), text)
        self.assertIn("'he' (0, 1)", text)
        self.assertIn("'falls' (1, 2)", text)

    def test_timeout(self):
        with self.assertRaises(Timeout):
            self.parser.parse('he said that she likes herself'.split(), timeout=time.time() - 1)

    def test_parallel_parsing(self):
        sentences = ['he likes himself', 'he likes herself', 'they like themselves',
                     'he like him', 'mary likes herself', 'mary likes himself',
                     'he said that she likes herself', 'he said that she likes himself'] * 4
        expected = [self.parser.accepts(sentence.split()) for sentence in sentences]
        with ThreadPoolExecutor(max_workers=4) as executor:
            results = list(executor.map(lambda sentence: self.parser.accepts(sentence.split()),
                                        sentences))
        self.assertEqual(results, expected)
        self.assertEqual(expected[:8], [True, False, True, False, True, False, True, False])


AMBIGUOUS_GRAMMAR = """
S -> NP
NP[ num: #n ] -> NP[ num: #n ] PP
NP[ num: #n ] -> N[ num: #n ]
NP[ num: #n ] -> NP[ num: #n ] and NP
PP -> P NP
N[ num: sg ] -> fish
N[ num: pl ] -> fish
P -> with
"""


class TestParser(TestCase):

    def test_multiple_readings(self):
        model = GrammarParser().parse_model(AMBIGUOUS_GRAMMAR)
        result = Parser(model).parse(['fish'])
        self.assertTrue(result.accepted)
        self.assertEqual(result.readings, (FeatureStructure(),))
        self.assertEqual(len(result.roots[0]), 2)
        self.assertEqual(result.derivation_count, 2)
        derivations = list(result.iter_derivations())
        self.assertEqual(len(derivations), 2)
        self.assertEqual({d.children[0].features['num'] for d in derivations},
                         {Atom('sg'), Atom('pl')})

    def test_ambiguous_attachment(self):
        model = GrammarParser().parse_model(AMBIGUOUS_GRAMMAR)
        result = Parser(model).parse('fish with fish and fish'.split())
        self.assertTrue(result.accepted)
        derivations = list(result.iter_derivations())
        self.assertEqual(len(derivations), len(set(derivations)))
        self.assertEqual(len(derivations), result.derivation_count)
        self.assertEqual(len(list(result.iter_derivations(limit=3))), 3)

    def test_unary_closure(self):
        grammar = '\n'.join([
            'S[ mood: #m ] -> Clause[ mood: #m ]',
            'Clause[ mood: decl, num: #n ] -> VP[ num: #n ]',
            'VP[ num: #n ] -> V[ num: #n ]',
            'V[ num: pl ] -> run',
        ])
        result = Parser(GrammarParser().parse_model(grammar)).parse(['run'])
        self.assertTrue(result.accepted)
        self.assertEqual(result.feature_structure, FeatureStructure(mood='decl'))
        self.assertEqual(result.derivation.to_str(simplify=True),
                         "S[ mood: decl ]: Clause[ mood: decl, num: pl ]: "
                         "VP[ num: pl ]: V[ num: pl ]: 'run' (0, 1)")

    def test_unary_cycles_terminate(self):
        grammar = '\n'.join([
            'S[ f: #x ] -> A[ f: #x ]',
            'A[ f: #x ] -> B[ f: #x ]',
            'B[ f: #x ] -> A[ f: #x ]',
            'A[ f: a ] -> x',
        ])
        result = Parser(GrammarParser().parse_model(grammar)).parse(['x'])
        self.assertTrue(result.accepted)
        self.assertEqual(result.derivation_count, 1)
        self.assertEqual(len(list(result.iter_derivations())), 1)

    def test_terminals_in_rules(self):
        grammar = '\n'.join([
            'S -> N[ case: nom ] V that S',
            'S -> N[ case: nom ] V',
            'N[ case: nom ] -> we',
            'V -> think',
            'V -> know',
        ])
        parser = Parser(GrammarParser().parse_model(grammar))
        self.assertTrue(parser.accepts('we think that we know'.split()))
        self.assertFalse(parser.accepts('we think we know that'.split()))
        self.assertEqual(parser.parse(['that']).unknown_tokens, ())

    def test_word_as_only_term(self):
        model = GrammarParser().parse_model('S[ f: #x ] -> Greeting[ f: #x ]\nGreeting -> hello')
        model = Model(list(model.rules) + [Rule('Greeting', {'f': 'wave'}, [RuleTerm('hi')])],
                      model.lexical_entries)
        parser = Parser(model)
        self.assertEqual(parser.parse(['hi']).feature_structure, FeatureStructure(f='wave'))
        self.assertEqual(parser.parse(['hello']).feature_structure, FeatureStructure(f=TOP))

    def test_underspecified_tag_is_accepted(self):
        grammar = '\n'.join([
            'S[ num: #n, extra: #unused ] -> N[ num: #n ]',
            'N[ num: sg ] -> it',
        ])
        result = Parser(GrammarParser().parse_model(grammar)).parse(['it'])
        self.assertTrue(result.accepted)
        self.assertEqual(result.feature_structure, FeatureStructure(num='sg', extra='**top**'))

    def test_case_sensitivity(self):
        model = GrammarParser().parse_model('S -> N\nN -> it')
        self.assertFalse(Parser(model).accepts(['It']))
        self.assertTrue(Parser(model, case_sensitive=False).accepts(['It']))

    def test_strings_are_not_token_sequences(self):
        model = GrammarParser().parse_model('S -> N\nN -> it')
        with self.assertRaises(TypeError):
            Parser(model).parse('it')

    def test_time_limit(self):
        model = GrammarParser().parse_model('S -> N\nN -> it')
        with self.assertRaises(ValueError):
            Parser(model, time_limit=0)
        self.assertTrue(Parser(model, time_limit=60).accepts(['it']))

    def test_pruned_combinations_are_logged(self):
        grammar = '\n'.join([
            'S -> N[ num: #n ] V[ num: #n ]',
            'N[ num: sg ] -> it',
            'V[ num: pl ] -> run',
        ])
        parser = Parser(GrammarParser().parse_model(grammar))
        with self.assertLogs('featurechart.parsing', logging.DEBUG) as logs:
            self.assertFalse(parser.accepts(['it', 'run']))
        self.assertTrue(any('Pruned' in message for message in logs.output))

    def test_parser_state(self):
        model = GrammarParser().parse_model('S -> N V\nN -> it\nV -> runs')
        state = ParsingAlgorithm.new_parser_state(model, ['it', 'runs'])
        self.assertIsInstance(state, ParserState)
        self.assertFalse(state.finished)
        state.process_all_spans()
        self.assertTrue(state.finished)
        self.assertEqual(state.chart.size, 3)
        self.assertEqual(state.chart.get_categories(0, 2), ('S',))
        self.assertTrue(state.get_result().accepted)
