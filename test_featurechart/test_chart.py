from unittest import TestCase

from featurechart.chart import Chart
from featurechart.features import FeatureStructure, FeatureTemplate
from featurechart.rules import Rule, RuleTerm, LexicalEntry
from featurechart.trees import Edge, EdgeSet, Derivation
from featurechart.utility import iter_combinations, iter_partitions


TOKENS = ('he', 'falls')
HE = LexicalEntry('he', 'N', FeatureStructure(num='sg'))
FALLS = LexicalEntry('falls', 'IV', FeatureStructure(num='sg'))
RULE = Rule('S', FeatureTemplate(), [RuleTerm('N', FeatureTemplate(num='#n')),
                                     RuleTerm('IV', FeatureTemplate(num='#n'))])


def make_leaf(entry, index):
    return Edge(index, index + 1, entry.category, entry.features, entry)


class TestUtility(TestCase):

    def test_iter_partitions(self):
        self.assertEqual(list(iter_partitions(0, 3, 2)), [((0, 1), (1, 3)), ((0, 2), (2, 3))])
        self.assertEqual(list(iter_partitions(2, 5, 3)), [((2, 3), (3, 4), (4, 5))])
        self.assertEqual(list(iter_partitions(0, 3, 1)), [((0, 3),)])
        self.assertEqual(list(iter_partitions(0, 2, 3)), [])
        self.assertEqual(len(list(iter_partitions(0, 6, 4))), 10)

    def test_iter_combinations(self):
        self.assertEqual(list(iter_combinations([[1, 2], [3], [4, 5]])),
                         [[1, 3, 4], [1, 3, 5], [2, 3, 4], [2, 3, 5]])
        self.assertEqual(list(iter_combinations([[1], []])), [])
        self.assertEqual(list(iter_combinations([])), [[]])


class TestEdges(TestCase):

    def test_invalid_spans(self):
        with self.assertRaises(ValueError):
            Edge(1, 1, 'N', FeatureStructure())

    def test_components_must_cover_the_span(self):
        he = EdgeSet(make_leaf(HE, 0))
        with self.assertRaises(ValueError):
            Edge(0, 3, 'S', FeatureStructure(), RULE, (he, EdgeSet(make_leaf(FALLS, 1))))
        with self.assertRaises(ValueError):
            Edge(0, 2, 'S', FeatureStructure(), RULE, (he, EdgeSet(make_leaf(FALLS, 2))))
        with self.assertRaises(ValueError):
            Edge(0, 2, 'S', FeatureStructure(), RULE, ())

    def test_word_edges(self):
        edge = Edge.for_word(TOKENS, 1)
        self.assertEqual(edge.span, (1, 2))
        self.assertEqual(edge.category, 'falls')
        self.assertIsNone(edge.rule)
        self.assertTrue(edge.is_leaf())
        self.assertEqual(edge.word, 'falls')

    def test_edge_set(self):
        edge = make_leaf(HE, 0)
        edge_set = EdgeSet(edge)
        self.assertIs(edge_set.best_edge, edge)
        self.assertFalse(edge_set.add(make_leaf(HE, 0)))
        self.assertEqual(len(edge_set), 1)
        with self.assertRaises(ValueError):
            edge_set.add(make_leaf(FALLS, 0))


class TestChart(TestCase):

    def test_add(self):
        chart = Chart(TOKENS)
        is_new, he = chart.add(make_leaf(HE, 0))
        self.assertTrue(is_new)
        is_new, same = chart.add(make_leaf(HE, 0))
        self.assertFalse(is_new)
        self.assertIs(same, he)
        _, falls = chart.add(make_leaf(FALLS, 1))
        sentence = Edge(0, 2, 'S', FeatureStructure(), RULE, (he, falls),
                        FeatureStructure(n='sg'))
        self.assertTrue(chart.add(sentence)[0])
        self.assertEqual(chart.size, 3)
        self.assertEqual(chart.edge_count, 3)
        self.assertEqual(list(chart.iter_spans()), [(0, 1), (0, 2), (1, 2)])
        self.assertEqual(chart.get_edge_sets(0, 2, 'S'), (chart.get_edge_set(0, 2, 'S',
                                                                            FeatureStructure()),))
        self.assertEqual(chart.get_edge_sets(0, 2, 'N'), ())
        self.assertTrue(chart.has_range(0, 1))
        self.assertFalse(chart.has_range(1, 1))
        self.assertEqual(chart.summarize(), {(0, 1): 1, (0, 2): 1, (1, 2): 1})

    def test_edges_beyond_input(self):
        with self.assertRaises(ValueError):
            Chart(('he',)).add(make_leaf(FALLS, 1))

    def test_empty_spans(self):
        chart = Chart(('a', 'he', 'b', 'c', 'he'))
        self.assertEqual(chart.empty_spans(), [(0, 5)])
        chart.add(make_leaf(HE, 1))
        chart.add(make_leaf(HE, 4))
        self.assertEqual(chart.empty_spans(), [(0, 1), (2, 4)])

    def test_underivable_spans(self):
        chart = Chart(TOKENS)
        self.assertEqual(chart.underivable_spans(), [(0, 1), (0, 2), (1, 2)])
        _, he = chart.add(make_leaf(HE, 0))
        _, falls = chart.add(make_leaf(FALLS, 1))
        self.assertEqual(chart.underivable_spans(), [(0, 2)])
        chart.add(Edge(0, 2, 'S', FeatureStructure(), RULE, (he, falls)))
        self.assertEqual(chart.underivable_spans(), [])


class TestDerivation(TestCase):

    def test_from_edge(self):
        he = EdgeSet(make_leaf(HE, 0))
        falls = EdgeSet(make_leaf(FALLS, 1))
        edge = Edge(0, 2, 'S', FeatureStructure(), RULE, (he, falls), FeatureStructure(n='sg'))
        derivation = Derivation.from_edge(edge)
        self.assertEqual(derivation.words, ('he', 'falls'))
        self.assertEqual([child.category for child in derivation.children], ['N', 'IV'])
        self.assertEqual(derivation.bindings.to_dict(), {'n': 'sg'})
        self.assertEqual(list(Derivation.iter_from_edge(edge)), [derivation])
        self.assertEqual(derivation.to_str(simplify=True),
                         "S:\n    N[ num: sg ]: 'he' (0, 1)\n    IV[ num: sg ]: 'falls' (1, 2)")

    def test_child_count_must_match(self):
        he = EdgeSet(make_leaf(HE, 0))
        falls = EdgeSet(make_leaf(FALLS, 1))
        edge = Edge(0, 2, 'S', FeatureStructure(), RULE, (he, falls))
        with self.assertRaises(ValueError):
            Derivation(edge, ())
