"""
Parsing utilities for the key:value argument mini-language.

Arguments such as ``"QA:2 BE:3 FE:4"`` or ``"storypoints:4 dealsize:2,3,4"``
are turned into ordered string mappings. There is no escaping, so neither
keys nor values can contain a space or a ``:``.
"""
import logging
import re
from typing import Dict, Mapping

from jisub.models.jira import JiraFormatError

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


class MiniLanguageParser:
    """Utility class for the ``key:value key:value`` argument syntax."""

    SEPARATOR = ":"

    @staticmethod
    def parse(text: str) -> Dict[str, str]:
        """
        Parse a mini-language string into an ordered mapping.

        Args:
            text: Space delimited ``key:value`` tokens (e.g. 'QA:2 BE:3')

        Returns:
            Mapping of keys to values in first-seen order; later duplicates
            overwrite earlier values. Empty input yields an empty mapping.

        Raises:
            JiraFormatError: If a token does not split into exactly one key
                and one value, or the key is empty
        """
        result: Dict[str, str] = {}
        if not text or not text.strip():
            return result

        for token in text.split(" "):
            if not token:
                continue

            entry = _WHITESPACE.sub("", token).split(MiniLanguageParser.SEPARATOR)
            if len(entry) != 2:
                raise JiraFormatError(
                    f"incorrect value format {token!r}, expect: key:value"
                )

            key, value = entry
            if not key:
                raise JiraFormatError(f"missing key in {token!r}, expect: key:value")

            if key in result:
                logger.debug(f"Duplicate key '{key}' overrides value '{result[key]}' with '{value}'")
            result[key] = value

        return result

    @staticmethod
    def format(mapping: Mapping[str, str]) -> str:
        """Render a mapping back into mini-language form."""
        return " ".join(
            f"{key}{MiniLanguageParser.SEPARATOR}{value}" for key, value in mapping.items()
        )
