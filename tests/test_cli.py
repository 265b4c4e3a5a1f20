"""
Tests for the jisub command line interface.
"""
import json

import httpx
import pytest
from click.testing import CliRunner

from jisub import __version__, main
from jisub.config.settings import ConfigStore
from jisub.services.jira.service import JiraService
from tests.conftest import BASE_URL, TOKEN


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "jisub-config.ini"
    store = ConfigStore(path)
    store.set("jira", "url", BASE_URL)
    store.set("user", "token", TOKEN)
    return str(path)


@pytest.fixture
def use_transport(monkeypatch, make_transport):
    """Route the CLI's service through a simulated HTTP server."""
    def _use(*responses):
        transport = make_transport(*responses)
        monkeypatch.setattr(main, "build_service", lambda settings: JiraService(settings, transport=transport))
    return _use


def test_version(runner):
    result = runner.invoke(main.cli, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == f"jisub version {__version__}"


def test_help_lists_examples(runner):
    result = runner.invoke(main.cli, ["-h"])

    assert result.exit_code == 0
    assert "--sub-tasks" in result.output
    assert 'jisub --config "user.token <token>"' in result.output


def test_config_update(runner, tmp_path):
    path = tmp_path / "nested" / "jisub-config.ini"

    result = runner.invoke(main.cli, ["--config-file", str(path), "-c", "jira.url https://jira/rest/api/2"])

    assert result.exit_code == 0
    assert ConfigStore(path).get("jira", "url") == "https://jira/rest/api/2"


def test_config_update_from_env(runner, tmp_path):
    path = tmp_path / "env.ini"

    result = runner.invoke(main.cli, ["--config", "user.token abc"], env={"JISUB_CONFIG": str(path)})

    assert result.exit_code == 0
    assert ConfigStore(path).get("user", "token") == "abc"


def test_config_update_malformed(runner, tmp_path):
    result = runner.invoke(main.cli, ["--config-file", str(tmp_path / "c.ini"), "-c", "jira.url"])

    assert result.exit_code != 0
    assert "wrong number of arguments provided" in result.output


def test_missing_issue_key(runner, config_file):
    result = runner.invoke(main.cli, ["--config-file", config_file, "-st", "QA:2"])

    assert result.exit_code == 2
    assert "missing required issue key" in result.output


def test_sub_tasks_and_fields(runner, config_file, use_transport, sent_requests, parent_issue_data):
    use_transport(
        httpx.Response(200, json=parent_issue_data),
        httpx.Response(201, json={"issues": [{"key": "JIRA-39107"}, {"key": "JIRA-39108"}], "errors": []}),
        httpx.Response(204)
    )

    result = runner.invoke(main.cli, [
        "--config-file", config_file,
        "-st", "QA:2 BE:3",
        "--fields", "storypoints:4 dealsize:2,3,4",
        "JIRA-39106"
    ])

    assert result.exit_code == 0, result.output
    assert "sub tasks:\nJIRA-39107\nJIRA-39108\n" in result.output
    assert "issue updated JIRA-39106" in result.output
    assert [request.method for request in sent_requests] == ["GET", "POST", "PUT"]
    assert sent_requests[0].headers["Authorization"] == f"Bearer {TOKEN}"
    assert json.loads(sent_requests[2].content) == {"fields": {"storypoints": "4", "dealsize": "2,3,4"}}


def test_fetch_only(runner, config_file, use_transport, sent_requests, parent_issue_data):
    use_transport(httpx.Response(200, json=parent_issue_data))

    result = runner.invoke(main.cli, ["--config-file", config_file, "JIRA-39106"])

    assert result.exit_code == 0
    assert result.output == ""
    assert len(sent_requests) == 1


def test_malformed_sub_tasks_never_reach_network(runner, config_file, use_transport, sent_requests):
    use_transport()

    result = runner.invoke(main.cli, ["--config-file", config_file, "-st", "QA2", "JIRA-39106"])

    assert result.exit_code == 1
    assert "invalid sub tasks QA2" in result.output
    assert sent_requests == []


def test_issue_not_found(runner, config_file, use_transport):
    use_transport(httpx.Response(404, text="Issue Does Not Exist"))

    result = runner.invoke(main.cli, ["--config-file", config_file, "-st", "QA:2", "JIRA-404"])

    assert result.exit_code == 1
    assert "issue not found JIRA-404" in result.output
    assert "404" in result.output
    assert "Issue Does Not Exist" in result.output


def test_sub_task_failure_names_step_and_issue(runner, config_file, use_transport, parent_issue_data):
    use_transport(
        httpx.Response(200, json=parent_issue_data),
        httpx.Response(400, text="Field 'customfield_10106' cannot be set")
    )

    result = runner.invoke(main.cli, ["--config-file", config_file, "-st", "QA:2", "JIRA-39106"])

    assert result.exit_code == 1
    assert "error creating sub tasks QA:2, JIRA-39106" in result.output
    assert "cannot be set" in result.output


def test_field_update_failure_names_step_and_issue(runner, config_file, use_transport, parent_issue_data):
    use_transport(
        httpx.Response(200, json=parent_issue_data),
        httpx.Response(400, text="unknown field")
    )

    result = runner.invoke(main.cli, ["--config-file", config_file, "-f", "bogus:1", "JIRA-39106"])

    assert result.exit_code == 1
    assert "error updating issue fields bogus:1, JIRA-39106" in result.output


def test_bulk_errors_reported_as_warnings(runner, config_file, use_transport, parent_issue_data):
    use_transport(
        httpx.Response(200, json=parent_issue_data),
        httpx.Response(201, json={
            "issues": [{"key": "JIRA-39107"}],
            "errors": [{"status": 400, "failedElementNumber": 1}]
        })
    )

    result = runner.invoke(main.cli, ["--config-file", config_file, "-st", "QA:2 BE:3", "JIRA-39106"])

    assert result.exit_code == 0
    assert "JIRA-39107" in result.output
    assert "warning: sub task not created for JIRA-39106" in result.output


def test_missing_configuration(runner, tmp_path):
    result = runner.invoke(main.cli, ["--config-file", str(tmp_path / "none.ini"), "JIRA-1"])

    assert result.exit_code == 1
    assert "error creating jira client: missing jira.url value" in result.output


def test_transport_failure(runner, config_file, use_transport):
    use_transport(httpx.ConnectError("connection refused"))

    result = runner.invoke(main.cli, ["--config-file", config_file, "JIRA-1"])

    assert result.exit_code == 1
    assert "issue not found JIRA-1" in result.output
    assert "connection refused" in result.output


def test_non_numeric_story_points_never_reach_network(runner, config_file, use_transport, sent_requests):
    use_transport()

    result = runner.invoke(main.cli, ["--config-file", config_file, "-st", "QA:two", "JIRA-39106"])

    assert result.exit_code == 1
    assert "invalid sub tasks QA:two" in result.output
    assert sent_requests == []
