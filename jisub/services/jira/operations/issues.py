"""
Jira issue operations: fetch, sub-task creation and field updates.
"""
import logging
from typing import Mapping, Union

from jisub.services.jira.builders import JiraRequestBuilder
from jisub.services.jira.client import JiraClient
from jisub.services.jira.parsers import JiraDataParser
from jisub.models.jira import Issue, IssueCollection, JiraValidationError

logger = logging.getLogger(__name__)


class JiraIssueOperations:
    """Issue level operations, each a single request/response exchange."""

    def __init__(self, client: JiraClient, builder: JiraRequestBuilder, parser: JiraDataParser):
        """Initialize issue operations with client, builder and parser dependencies."""
        self.client = client
        self.builder = builder
        self.parser = parser

    def get_issue(self, issue_key: str) -> Issue:
        """
        Retrieve issue details by issue key.

        Args:
            issue_key: Issue key (e.g. 'JIRA-39106')

        Returns:
            The fetched Issue

        Raises:
            JiraValidationError: If the key is empty
            JiraServiceError: If the request fails
        """
        if not issue_key:
            raise JiraValidationError("missing required issue key")

        operation = f"get issue {issue_key}"
        response = self.client.make_request("GET", f"issue/{issue_key}")
        data = self.client.handle_response(response, operation)
        if data is None:
            logger.warning(f"{operation} returned no content")
            return Issue()
        return self.parser.parse_issue(data, operation)

    def create_sub_task(self, parent: Issue, summary_prefix: str,
                        story_points: Union[str, int, float]) -> Issue:
        """
        Create a single sub-task under the parent issue.

        Args:
            parent: Parent issue
            summary_prefix: Prefix for the sub-task summary
            story_points: Story points estimate

        Returns:
            The created Issue (key, id and self only)
        """
        payload = self.builder.build_sub_task(parent, summary_prefix, story_points)

        operation = f"create sub-task for {parent.key}"
        response = self.client.make_request("POST", "issue", payload)
        data = self.client.handle_response(response, operation)
        if data is None:
            logger.warning(f"{operation} returned no content")
            return Issue()
        issue = self.parser.parse_issue(data, operation)

        logger.info(f"Created sub-task {issue.key} under {parent.key}")
        return issue

    def create_sub_tasks_bulk(self, parent: Issue, breakdown: Mapping[str, str]) -> IssueCollection:
        """
        Create one sub-task per breakdown entry (e.g. QA:2, BE:3) in one request.

        An empty breakdown returns an empty collection without calling the API.

        Args:
            parent: Parent issue
            breakdown: Label to story points mapping

        Returns:
            Collection of created issues
        """
        if not breakdown:
            logger.info(f"No sub-tasks requested for {parent.key or 'issue'}")
            return IssueCollection(issues=[])

        payload = self.builder.build_sub_tasks_bulk(parent, breakdown)

        operation = f"create sub-tasks for {parent.key}"
        response = self.client.make_request("POST", "issue/bulk", payload)
        data = self.client.handle_response(response, operation)
        if data is None:
            logger.warning(f"{operation} returned no content")
            return IssueCollection(issues=[])
        collection = self.parser.parse_issue_collection(data, operation)

        logger.info(f"Created {len(collection.issues)} sub-tasks under {parent.key}")
        return collection

    def update_issue(self, parent: Issue, update_data: Mapping[str, str]) -> None:
        """
        Update fields on the issue using key value data.

        Field names and values are sent verbatim; the server validates them.

        Raises:
            JiraValidationError: If the parent has no key
            JiraServiceError: If the request fails
        """
        if not parent.key:
            raise JiraValidationError("missing required issue key")

        if not update_data:
            logger.info(f"No field updates requested for {parent.key}")
            return

        payload = self.builder.build_issue_update(update_data)

        operation = f"update issue {parent.key}"
        response = self.client.make_request("PUT", f"issue/{parent.key}", payload)
        self.client.handle_response(response, operation, expect_body=False)

        logger.info(f"Updated fields {', '.join(update_data)} on {parent.key}")
