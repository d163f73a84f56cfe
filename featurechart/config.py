# -*- coding: utf-8 -*-

"""
Parser model configuration
"""

import configparser
import os
from typing import Optional, Mapping, Any, Tuple, NamedTuple

__author__ = 'Aaron Hosford'
__all__ = [
    'Language',
    'ModelConfig',
]


Language = NamedTuple('Language', [('name', str), ('iso639_1', Optional[str]),
                                   ('iso639_2', Optional[str])])


class ModelConfig:
    """Parser model configuration"""

    def __init__(self, config_file_path: str, defaults: Mapping[str, Any] = None):
        config_file_path = os.path.abspath(os.path.expanduser(config_file_path))

        if not os.path.isfile(config_file_path):
            raise FileNotFoundError(config_file_path)

        self._config_file_path = config_file_path

        data_folder = os.path.dirname(config_file_path)

        if defaults is None:
            defaults = {}
        else:
            defaults = dict(defaults)
        for option, value in (('Start Symbol', ''),
                              ('Case Sensitive', '1'),
                              ('Timeout', '')):
            if option not in defaults:
                defaults[option] = value

        config_parser = configparser.ConfigParser(defaults)
        config_parser.read(self._config_file_path, encoding='utf-8')

        # Languages
        languages = {}
        for language_section in config_parser.sections():
            if not language_section.startswith('Language:'):
                continue
            language_header_name = language_section[9:].strip()
            language_name = config_parser.get(language_section, 'Name',
                                              fallback=language_header_name).strip()
            if not language_name:
                continue
            iso639_1 = config_parser.get(language_section, 'ISO 639-1', fallback=None)
            iso639_2 = config_parser.get(language_section, 'ISO 639-2', fallback=None)
            languages[language_header_name] = Language(language_name, iso639_1, iso639_2)

        # Model
        self._model_name = config_parser.get('Model', 'Name').strip()
        language_section_name = config_parser.get('Model', 'Language', fallback='').strip()
        self._model_language = (languages.get(language_section_name, None)
                                if language_section_name
                                else None)

        # Grammar
        self._grammar_definition_files = tuple(
            os.path.join(data_folder, path.strip())
            for path in config_parser.get('Grammar', 'Grammar Definition File').split(';')
            if path.strip()
        )
        self._start_symbol = config_parser.get('Grammar', 'Start Symbol').strip() or None

        # Parsing
        if config_parser.has_section('Parsing'):
            self._case_sensitive = config_parser.getboolean('Parsing', 'Case Sensitive')
            timeout = config_parser.get('Parsing', 'Timeout').strip()
        else:
            self._case_sensitive = config_parser.getboolean('DEFAULT', 'Case Sensitive')
            timeout = ''
        self._timeout = float(timeout) if timeout else None
        if self._timeout is not None and self._timeout <= 0:
            raise ValueError("Timeout must be positive: %s" % timeout)

    @property
    def config_file_path(self) -> str:
        """The expanded, absolute path to the primary configuration file for the model"""
        return self._config_file_path

    @property
    def model_name(self) -> str:
        """The name of the model."""
        return self._model_name

    @property
    def model_language(self) -> Optional[Language]:
        """The language of the model."""
        return self._model_language

    @property
    def grammar_definition_files(self) -> Tuple[str, ...]:
        """Grammar definition file paths"""
        return self._grammar_definition_files

    @property
    def start_symbol(self) -> Optional[str]:
        """The start symbol, if it differs from the first rule's left-hand side."""
        return self._start_symbol

    @property
    def case_sensitive(self) -> bool:
        """Whether words must match the lexicon's spelling exactly, or are lower-cased first"""
        return self._case_sensitive

    @property
    def timeout(self) -> Optional[float]:
        """The default number of seconds a single parse may take, if limited"""
        return self._timeout
