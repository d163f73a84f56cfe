# -*- coding: utf-8 -*-

"""Model loading."""

import logging
import os
from typing import List, Tuple

from featurechart.config import ModelConfig
from featurechart.grammar import GrammarParser
from featurechart.model import Model
from featurechart.parsing import Parser
from featurechart.rules import Rule, LexicalEntry

__author__ = 'Aaron Hosford'
__all__ = [
    'ModelLoader',
    'get_builtin_model_path',
]


LOGGER = logging.getLogger(__name__)

DATA_FOLDER = os.path.join(os.path.dirname(__file__), 'data')


def get_builtin_model_path(name: str = 'reflexives') -> str:
    """Return the path to the configuration file of a model shipped with the package."""
    path = os.path.join(DATA_FOLDER, name, 'model.ini')
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    return path


class ModelLoader:
    """Model loading."""

    def __init__(self, model_path: str):
        self._model_path = model_path
        self._model_config_info = self.load_model_config()
        self._grammar_parser = GrammarParser()

    @property
    def model_config_info(self) -> ModelConfig:
        """Get the configuration info for the model."""
        return self._model_config_info

    def load_model_config(self, path: str = None) -> ModelConfig:
        """Load the model config info and return it. The path may name the configuration file
        itself or the folder holding it."""
        if path is None:
            path = self._model_path
        if os.path.isdir(path):
            path = os.path.join(path, 'model.ini')
        return ModelConfig(path)

    def load_grammar_definition_file(self, path: str) -> Tuple[List[Rule], List[LexicalEntry]]:
        """Load a grammar definition file as lists of rules and lexical entries."""
        with open(path, encoding='utf-8') as grammar_file:
            return self._grammar_parser.parse_grammar_definition_file(grammar_file, filename=path)

    def load_model(self, config_info: ModelConfig = None) -> Model:
        """Load the model and return it."""
        if config_info is None:
            config_info = self._model_config_info

        LOGGER.info("Loading model from %s...", config_info.config_file_path)

        rules = []
        lexical_entries = []
        for path in config_info.grammar_definition_files:
            file_rules, file_entries = self.load_grammar_definition_file(path)
            rules.extend(file_rules)
            lexical_entries.extend(file_entries)

        model = Model(rules, lexical_entries, config_info.start_symbol,
                      config_info.model_language, config_info)

        LOGGER.info("Done loading model %r from %s: %d rules, %d lexical entries.",
                    config_info.model_name, config_info.config_file_path, len(model.rules),
                    len(model.lexical_entries))
        return model

    def load_parser(self, config_info: ModelConfig = None) -> Parser:
        """Load the model and return a parser configured for it."""
        if config_info is None:
            config_info = self._model_config_info
        return Parser(self.load_model(config_info), config_info.case_sensitive,
                      config_info.timeout)
