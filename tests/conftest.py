"""
Shared fixtures for jisub tests.
"""
import copy
from typing import Any, Callable, List, Union

import httpx
import pytest

from jisub.config.settings import JiraSettings
from jisub.models.jira import Issue

BASE_URL = "https://jira.example.com/rest/api/2"
TOKEN = "secret-token"

PARENT_ISSUE_DATA = {
    "id": "10001",
    "key": "JIRA-39106",
    "self": f"{BASE_URL}/issue/10001",
    "fields": {
        "summary": "Checkout flow",
        "subtasks": [],
        "status": {"name": "To Do"},
        "issuetype": {"id": "10002", "name": "Story", "subtask": False},
        "project": {"id": "10200"},
        "labels": ["web"]
    }
}

ResponseOrError = Union[httpx.Response, Exception]


@pytest.fixture
def parent_issue_data() -> dict:
    return copy.deepcopy(PARENT_ISSUE_DATA)


@pytest.fixture
def parent_issue(parent_issue_data) -> Issue:
    return Issue.model_validate(parent_issue_data)


@pytest.fixture
def settings() -> JiraSettings:
    return JiraSettings(url=BASE_URL, token=TOKEN)


@pytest.fixture
def sent_requests() -> List[httpx.Request]:
    """Requests seen by the transport built with make_transport."""
    return []


@pytest.fixture
def make_transport(sent_requests) -> Callable[..., httpx.MockTransport]:
    """Build a transport that replays the given responses in order."""
    def _make(*responses: ResponseOrError) -> httpx.MockTransport:
        queue: List[Any] = list(responses)

        def handler(request: httpx.Request) -> httpx.Response:
            sent_requests.append(request)
            if not queue:
                raise AssertionError(f"unexpected request {request.method} {request.url}")
            response = queue.pop(0)
            if isinstance(response, Exception):
                raise response
            return response

        return httpx.MockTransport(handler)

    return _make
