"""
Main Jira service that wires the client, builder and parser together.
"""
import logging
from typing import Mapping, Optional, Union

import httpx

from jisub.config.settings import ConfigStore, JiraSettings
from jisub.services.jira.builders import JiraRequestBuilder
from jisub.services.jira.client import JiraClient
from jisub.services.jira.parsers import JiraDataParser
from jisub.services.jira.operations.issues import JiraIssueOperations
from jisub.models.jira import Issue, IssueCollection

logger = logging.getLogger(__name__)


class JiraService:
    """Facade over the Jira issue operations."""

    def __init__(self, settings: JiraSettings, transport: Optional[httpx.BaseTransport] = None):
        """
        Initialize the service from explicit settings.

        Args:
            settings: Connection and field settings
            transport: Optional httpx transport, passed to the HTTP client
        """
        # Builder first so a bad field configuration fails before a client is opened
        self.builder = JiraRequestBuilder(settings.story_points_field, settings.subtask_type)
        self.parser = JiraDataParser()
        self.client = JiraClient(
            settings.url,
            token=settings.token,
            timeout=settings.timeout,
            transport=transport
        )

        self.issues = JiraIssueOperations(self.client, self.builder, self.parser)

        logger.debug(f"Jira service initialized for {self.client.base_url}")

    @classmethod
    def from_store(cls, store: ConfigStore, transport: Optional[httpx.BaseTransport] = None) -> "JiraService":
        """Build a service from a config store; raises JiraConfigurationError on missing values."""
        return cls(store.load_settings(), transport=transport)

    def __enter__(self) -> "JiraService":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def get_issue(self, issue_key: str) -> Issue:
        """Retrieve issue details by issue key."""
        return self.issues.get_issue(issue_key)

    def create_sub_task(self, parent: Issue, summary_prefix: str,
                        story_points: Union[str, int, float]) -> Issue:
        """Create a single sub-task under the parent issue."""
        return self.issues.create_sub_task(parent, summary_prefix, story_points)

    def create_sub_tasks_bulk(self, parent: Issue, breakdown: Mapping[str, str]) -> IssueCollection:
        """Create sub-tasks for the parent issue from a work breakdown."""
        return self.issues.create_sub_tasks_bulk(parent, breakdown)

    def update_issue(self, parent: Issue, update_data: Mapping[str, str]) -> None:
        """Update fields on the parent issue."""
        self.issues.update_issue(parent, update_data)
