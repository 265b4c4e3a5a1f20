"""
Jira response parsing into typed models.
"""
import logging
from typing import Any

from pydantic import ValidationError

from jisub.models.jira import Issue, IssueCollection, JiraProtocolError

logger = logging.getLogger(__name__)


class JiraDataParser:
    """Maps decoded JSON responses onto the issue models."""

    def parse_issue(self, issue_data: Any, operation: str = "issue") -> Issue:
        """Parse a single issue resource into an Issue."""
        self._require_object(issue_data, operation)
        try:
            return Issue.model_validate(issue_data)
        except ValidationError as e:
            issue_key = issue_data.get("key", "Unknown")
            logger.error(f"Error parsing issue {issue_key}: {e}")
            raise JiraProtocolError(f"Failed to parse {operation} response for {issue_key}: {e}") from e

    def parse_issue_collection(self, data: Any, operation: str = "bulk create") -> IssueCollection:
        """Parse a bulk create response of the form {"issues": [...], "errors": [...]}."""
        self._require_object(data, operation)
        try:
            collection = IssueCollection.model_validate(data)
        except ValidationError as e:
            logger.error(f"Error parsing {operation} response: {e}")
            raise JiraProtocolError(f"Failed to parse {operation} response: {e}") from e

        if collection.errors:
            logger.warning(f"{operation} reported {len(collection.errors)} failed elements")
        return collection

    @staticmethod
    def _require_object(data: Any, operation: str) -> None:
        if not isinstance(data, dict):
            error_msg = f"{operation} response is not a JSON object: {type(data)}"
            logger.error(error_msg)
            raise JiraProtocolError(error_msg)
