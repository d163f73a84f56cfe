import logging
import os
import shutil
import tempfile
from unittest import TestCase

from featurechart.config import ModelConfig, Language
from featurechart.exceptions import GrammarSyntaxError
from featurechart.loader import ModelLoader, get_builtin_model_path
from featurechart.parsing import Parser


CONFIG = """
[Language:Test]
Name = Testish
ISO 639-1 = tt

[Model]
Name = Tiny
Language = Test

[Grammar]
Grammar Definition File = rules.fgr; words.fgr

[Parsing]
Case Sensitive = yes
Timeout = 2.5
"""


class TestModelConfig(TestCase):

    def setUp(self):
        self.folder = tempfile.mkdtemp()
        self.config_path = os.path.join(self.folder, 'tiny.ini')
        with open(self.config_path, 'w', encoding='utf-8') as config_file:
            config_file.write(CONFIG)
        with open(os.path.join(self.folder, 'rules.fgr'), 'w', encoding='utf-8') as rules_file:
            rules_file.write('S[ num: #n ] -> N[ num: #n ] V[ num: #n ]\n')
        with open(os.path.join(self.folder, 'words.fgr'), 'w', encoding='utf-8') as words_file:
            words_file.write('N[ num: pl ] -> dogs\nV[ num: pl ] -> bark\nV[ num: sg ] -> barks\n')

    def tearDown(self):
        shutil.rmtree(self.folder)

    def test_config(self):
        config = ModelConfig(self.config_path)
        self.assertEqual(config.config_file_path, os.path.abspath(self.config_path))
        self.assertEqual(config.model_name, 'Tiny')
        self.assertEqual(config.model_language, Language('Testish', 'tt', None))
        self.assertEqual(config.grammar_definition_files,
                         (os.path.join(self.folder, 'rules.fgr'),
                          os.path.join(self.folder, 'words.fgr')))
        self.assertIsNone(config.start_symbol)
        self.assertTrue(config.case_sensitive)
        self.assertEqual(config.timeout, 2.5)

    def test_missing_config(self):
        with self.assertRaises(FileNotFoundError):
            ModelConfig(os.path.join(self.folder, 'missing.ini'))

    def test_bad_timeout(self):
        with open(self.config_path, 'w', encoding='utf-8') as config_file:
            config_file.write(CONFIG.replace('2.5', '-1'))
        with self.assertRaises(ValueError):
            ModelConfig(self.config_path)

    def test_load_model(self):
        loader = ModelLoader(self.folder + os.sep + 'tiny.ini')
        with self.assertLogs('featurechart.loader', logging.INFO):
            model = loader.load_model()
        self.assertEqual(model.start, 'S')
        self.assertEqual(model.language.iso639_1, 'tt')
        self.assertIs(model.config_info, loader.model_config_info)
        parser = loader.load_parser()
        self.assertIsInstance(parser, Parser)
        self.assertEqual(parser.time_limit, 2.5)
        self.assertTrue(parser.accepts(['dogs', 'bark']))
        self.assertFalse(parser.accepts(['dogs', 'barks']))
        self.assertFalse(parser.accepts(['Dogs', 'bark']))

    def test_grammar_errors_name_the_file(self):
        with open(os.path.join(self.folder, 'words.fgr'), 'a', encoding='utf-8') as words_file:
            words_file.write('V[ num: ] -> barked\n')
        with self.assertRaises(GrammarSyntaxError) as context:
            ModelLoader(self.config_path).load_model()
        self.assertEqual(context.exception.filename, os.path.join(self.folder, 'words.fgr'))
        self.assertEqual(context.exception.lineno, 4)


class TestBuiltinModels(TestCase):

    def test_reflexives(self):
        path = get_builtin_model_path('reflexives')
        loader = ModelLoader(os.path.dirname(path))
        config = loader.model_config_info
        self.assertEqual(config.model_name, 'Reflexives')
        self.assertEqual(config.model_language.iso639_2, 'eng')
        self.assertEqual(config.start_symbol, 'S')
        self.assertFalse(config.case_sensitive)
        self.assertIsNone(config.timeout)
        model = loader.load_model()
        self.assertEqual(model.max_arity, 4)
        self.assertEqual(len(model.rules), 3)
        self.assertIn('himself', {entry.word for entry in model.lexical_entries})

    def test_unknown_model(self):
        with self.assertRaises(FileNotFoundError):
            get_builtin_model_path('no such model')
