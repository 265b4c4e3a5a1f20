"""
Jira service package for issue and sub-task operations.
"""
from jisub.models.jira import (
    Issue,
    IssueCollection,
    JiraServiceError,
    JiraValidationError,
    JiraFormatError,
    JiraConfigurationError,
    JiraTransportError,
    JiraRemoteError,
    JiraProtocolError
)
from jisub.services.jira.service import JiraService

__all__ = [
    # Models and exceptions
    "Issue",
    "IssueCollection",
    "JiraServiceError",
    "JiraValidationError",
    "JiraFormatError",
    "JiraConfigurationError",
    "JiraTransportError",
    "JiraRemoteError",
    "JiraProtocolError",
    # Services
    "JiraService"
]
