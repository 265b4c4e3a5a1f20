"""
Request body construction for Jira issue create and update endpoints.
"""
import logging
import math
from typing import Dict, Any, Mapping, Optional, Union

from jisub.models.jira import (
    Issue,
    JiraConfigurationError,
    JiraFormatError,
    JiraValidationError
)

logger = logging.getLogger(__name__)

Number = Union[int, float]


class JiraRequestBuilder:
    """Builds JSON documents for sub-task creation and field updates."""

    def __init__(self, story_points_field: str, subtask_issue_type: str):
        """
        Initialize the builder.

        Args:
            story_points_field: Field id holding story points (e.g. 'customfield_10106')
            subtask_issue_type: Name of the sub-task issue type (e.g. 'Sub-task')

        Raises:
            JiraConfigurationError: If either value is empty
        """
        if not story_points_field:
            raise JiraConfigurationError("missing story points field name")
        if not subtask_issue_type:
            raise JiraConfigurationError("missing sub-task issue type name")

        self.story_points_field = story_points_field
        self.subtask_issue_type = subtask_issue_type

    def build_sub_task(self, parent: Issue, summary_prefix: str,
                       story_points: Union[str, Number]) -> Dict[str, Any]:
        """
        Build the body for creating a single sub-task under parent.

        Args:
            parent: Parent issue, must carry a key and a project id
            summary_prefix: Prefix for the sub-task summary (e.g. 'QA')
            story_points: Story points estimate, numeric or numeric string

        Returns:
            Issue creation document
        """
        project_id = self._require_parent(parent)
        return self._sub_task_document(parent, project_id, summary_prefix, story_points)

    def build_sub_tasks_bulk(self, parent: Issue, breakdown: Mapping[str, str]) -> Dict[str, Any]:
        """
        Build the body for the bulk create endpoint.

        Args:
            parent: Parent issue, must carry a key and a project id
            breakdown: Label to story points mapping (e.g. {'QA': '2', 'BE': '3'})

        Returns:
            Bulk creation document with one entry per breakdown item, in order
        """
        project_id = self._require_parent(parent)
        issue_updates = [
            self._sub_task_document(parent, project_id, label, points)
            for label, points in breakdown.items()
        ]
        logger.debug(f"Built bulk document with {len(issue_updates)} sub-tasks for {parent.key}")
        return {"issueUpdates": issue_updates}

    def build_issue_update(self, update_data: Mapping[str, str]) -> Dict[str, Any]:
        """Build a field patch document; names and values pass through as given."""
        return {"fields": dict(update_data)}

    def _sub_task_document(self, parent: Issue, project_id: str, summary_prefix: str,
                           story_points: Union[str, Number]) -> Dict[str, Any]:
        return {
            "fields": {
                "project": {"id": project_id},
                "parent": {"key": parent.key},
                "summary": self._summary(summary_prefix, parent.summary),
                "issuetype": {"name": self.subtask_issue_type},
                self.story_points_field: self.parse_story_points(story_points),
            }
        }

    @staticmethod
    def _summary(prefix: str, parent_summary: Optional[str] = None) -> str:
        if parent_summary:
            return f"{prefix}: {parent_summary}"
        return prefix

    @staticmethod
    def _require_parent(parent: Issue) -> str:
        if not parent.key:
            raise JiraValidationError("missing required issue key")
        project_id = parent.project_id
        if not project_id:
            raise JiraValidationError(f"issue {parent.key} has no project id")
        return project_id

    @staticmethod
    def parse_story_points(value: Union[str, Number]) -> Number:
        """
        Convert a story points value into a JSON number.

        Integral values become ints so '3' is sent as 3 rather than 3.0.

        Raises:
            JiraFormatError: If the value is not numeric
        """
        if isinstance(value, bool):
            raise JiraFormatError(f"invalid story points {value!r}, expect a number")
        if isinstance(value, (int, float)):
            number = float(value)
        else:
            try:
                number = float(str(value).strip())
            except ValueError:
                raise JiraFormatError(f"invalid story points {value!r}, expect a number")

        if not math.isfinite(number):
            raise JiraFormatError(f"invalid story points {value!r}, expect a number")
        return int(number) if number.is_integer() else number
