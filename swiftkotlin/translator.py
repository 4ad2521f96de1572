"""
Swift to Kotlin translation: parse the source, then render the tree.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from swiftkotlin.config import TranslatorConfig
from swiftkotlin.declarations import KotlinFormatter
from swiftkotlin.errors import ResourceError
from swiftkotlin.swift_parser import SwiftParser

logger = logging.getLogger(__name__)


class Translator:
    """Parser and formatter pair sharing one configuration."""

    def __init__(self, config: Optional[TranslatorConfig] = None):
        self.config = config or TranslatorConfig()
        self.parser = SwiftParser()
        self.formatter = KotlinFormatter(self.config)

    def translate_text(self, content: str) -> str:
        """
        Translates Swift source text to Kotlin source text.

        Raises:
            SwiftParseError: If the text cannot be parsed.
            UnsupportedConstructError: Under the 'reject' policy.
        """
        tree = self.parser.parse(content)
        return self.formatter.format(tree)

    def translate_file(self, path: Union[str, Path]) -> str:
        """
        Reads a Swift file and translates its content.

        Raises:
            ResourceError: If the file cannot be read as UTF-8 text.
        """
        try:
            with open(path, 'r', encoding='utf-8') as f:
                content = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ResourceError(str(path), str(e)) from e
        logger.debug("Translating %s (%d characters)", path, len(content))
        return self.translate_text(content)


def translate_text(content: str, config: Optional[TranslatorConfig] = None) -> str:
    """Convenience function to translate source text."""
    return Translator(config).translate_text(content)


def translate_file(path: Union[str, Path], config: Optional[TranslatorConfig] = None) -> str:
    """Convenience function to translate a file."""
    return Translator(config).translate_file(path)
