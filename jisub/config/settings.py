"""
Configuration store and settings for jisub.

Settings live in an INI file with a ``[jira]`` section (``url`` and optional
tuning keys) and a ``[user]`` section (``token``). The store is only read
when a command needs it; nothing is loaded at import time.
"""
import configparser
import logging
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field

from jisub.models.jira import JiraConfigurationError, JiraFormatError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "JISUB_CONFIG"
DEFAULT_CONFIG_PATH = Path("jisub") / "jisub-config.ini"

DEFAULT_STORY_POINTS_FIELD = "customfield_10106"
DEFAULT_SUBTASK_TYPE = "Sub-task"
DEFAULT_TIMEOUT = 30.0


def default_config_path() -> Path:
    """Config path from JISUB_CONFIG, else jisub/jisub-config.ini under the working directory."""
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_PATH


class JiraSettings(BaseModel):
    """Validated settings handed to the Jira service."""
    url: str
    token: str
    story_points_field: str = DEFAULT_STORY_POINTS_FIELD
    subtask_type: str = DEFAULT_SUBTASK_TYPE
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)


class ConfigStore:
    """Key value store persisted as an INI file."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else default_config_path()

    def _load(self) -> configparser.ConfigParser:
        parser = configparser.ConfigParser(interpolation=None)
        if self.path.exists():
            try:
                parser.read(self.path, encoding="utf-8")
            except configparser.Error as e:
                raise JiraConfigurationError(f"invalid config file {self.path}: {e}") from e
        return parser

    def get(self, section: str, key: str) -> str:
        """Return the stored value, or an empty string when absent."""
        return self._load().get(section, key, fallback="")

    def set(self, section: str, key: str, value: str) -> None:
        """Store a value and save the file, creating it when missing."""
        parser = self._load()
        if not parser.has_section(section):
            parser.add_section(section)
        parser.set(section, key, value)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                parser.write(handle)
        except OSError as e:
            raise JiraConfigurationError(f"cannot save config file {self.path}: {e}") from e

        logger.info(f"Saved {section}.{key} to {self.path}")

    def update_from_argument(self, argument: str) -> None:
        """
        Apply a ``section.key value`` argument, e.g. 'jira.url https://jira/rest/api/2'.

        Raises:
            JiraFormatError: If the argument is not ``section.key value``
        """
        items = argument.split(" ")
        if len(items) < 2:
            raise JiraFormatError("wrong number of arguments provided")

        section_key = items[0].split(".")
        if len(section_key) < 2 or not section_key[0] or not section_key[1]:
            raise JiraFormatError("incorrect value format, expect: section.key")

        self.set(section_key[0], section_key[1], items[1])

    def load_settings(self) -> JiraSettings:
        """
        Read the settings needed to talk to Jira.

        Raises:
            JiraConfigurationError: If jira.url or user.token is missing, or a
                tuning value is invalid
        """
        parser = self._load()

        url = parser.get("jira", "url", fallback="")
        if not url:
            raise JiraConfigurationError("missing jira.url value")

        token = parser.get("user", "token", fallback="")
        if not token:
            raise JiraConfigurationError("missing user.token value")

        timeout_value = parser.get("jira", "timeout", fallback="")
        try:
            timeout = float(timeout_value) if timeout_value else DEFAULT_TIMEOUT
        except ValueError:
            raise JiraConfigurationError(f"invalid jira.timeout value {timeout_value!r}")
        if timeout <= 0:
            raise JiraConfigurationError(f"invalid jira.timeout value {timeout_value!r}")

        return JiraSettings(
            url=url,
            token=token,
            story_points_field=parser.get("jira", "story_points_field", fallback="") or DEFAULT_STORY_POINTS_FIELD,
            subtask_type=parser.get("jira", "subtask_type", fallback="") or DEFAULT_SUBTASK_TYPE,
            timeout=timeout
        )
