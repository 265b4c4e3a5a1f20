"""
Jira API data models and exceptions.

These models represent the subset of the Jira issue resource that jisub reads
back from the API. Unknown attributes in responses are ignored so newer server
versions keep decoding.
"""
from typing import List, Dict, Any, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class IssueStatus(BaseModel):
    """Workflow status of an issue."""
    name: Optional[str] = None


class IssueType(BaseModel):
    """Issue type descriptor."""
    id: Optional[str] = None
    name: Optional[str] = None
    subtask: bool = False

    @field_validator("subtask", mode="before")
    @classmethod
    def null_to_false(cls, value: Any) -> Any:
        return False if value is None else value


class JiraProject(BaseModel):
    """Owning project reference."""
    id: Optional[str] = None


class IssueFields(BaseModel):
    """Descriptive attributes of an issue. Every attribute is optional."""
    model_config = ConfigDict(populate_by_name=True)

    summary: Optional[str] = None
    subtasks: List["Issue"] = []
    status: Optional[IssueStatus] = None
    issue_type: Optional[IssueType] = Field(default=None, alias="issuetype")
    project: Optional[JiraProject] = None
    labels: List[str] = []

    @field_validator("subtasks", mode="before")
    @classmethod
    def null_list_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("labels", mode="before")
    @classmethod
    def drop_null_labels(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [label for label in value if label is not None]
        return value


class Issue(BaseModel):
    """Represents a Jira issue as returned by fetch and create endpoints."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None  # Server assigned, string encoded
    key: str = ""
    self_url: Optional[str] = Field(default=None, alias="self")
    fields: Optional[IssueFields] = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("key", mode="before")
    @classmethod
    def null_key_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def project_id(self) -> Optional[str]:
        if self.fields and self.fields.project:
            return self.fields.project.id
        return None

    @property
    def summary(self) -> Optional[str]:
        return self.fields.summary if self.fields else None


IssueFields.model_rebuild()


class IssueCollection(BaseModel):
    """Result of a bulk create; empty is a valid outcome."""
    issues: List[Issue] = []
    errors: List[Dict[str, Any]] = []  # Per-element failures reported by the bulk endpoint

    @field_validator("issues", "errors", mode="before")
    @classmethod
    def null_list_to_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def issue_keys(self) -> List[str]:
        return [issue.key for issue in self.issues]


# Jira-specific exceptions
class JiraServiceError(Exception):
    """Base exception for every error raised by jisub."""
    pass


class JiraValidationError(JiraServiceError):
    """Exception raised when input fails validation before any request."""
    pass


class JiraFormatError(JiraValidationError):
    """Exception raised for malformed key:value input."""
    pass


class JiraConfigurationError(JiraServiceError):
    """Exception raised for missing or invalid configuration."""
    pass


class JiraTransportError(JiraServiceError):
    """Exception raised when the HTTP exchange itself fails."""
    pass


class JiraRemoteError(JiraServiceError):
    """Exception raised when the API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: int, response_text: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text


class JiraProtocolError(JiraServiceError):
    """Exception raised when a successful response cannot be decoded."""
    pass
