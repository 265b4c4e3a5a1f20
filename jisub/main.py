"""
Command line entry point for jisub.

Examples:
    jisub --config "jira.url https://jira-api.com/jira/rest/api/2"
    jisub --config "user.token <token>"
    jisub --sub-tasks "QA:2 BE:3 FE:4" --fields "storypoints:4 dealsize:2,3,4" JIRA-39106
"""
import logging
import sys
from typing import Dict, Optional

import click

from jisub import __version__
from jisub.config.settings import CONFIG_ENV_VAR, ConfigStore, JiraSettings
from jisub.services.jira.builders import JiraRequestBuilder
from jisub.services.jira.service import JiraService
from jisub.utils.mini_language import MiniLanguageParser
from jisub.models.jira import Issue, JiraServiceError

logger = logging.getLogger(__name__)

EPILOG = """\b
Examples:
  jisub --config "jira.url https://jira-api.com/jira/rest/api/2"
  jisub --config "user.token <token>"
  jisub --sub-tasks "QA:2 BE:3 FE:4" --fields "storypoints:4 dealsize:2,3,4" JIRA-39106
"""


def configure_logging(debug: bool) -> None:
    """Send log records to stderr so stdout only carries command output."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )
    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)


def build_service(settings: JiraSettings) -> JiraService:
    return JiraService(settings)


def _parse_argument(name: str, value: Optional[str]) -> Dict[str, str]:
    try:
        return MiniLanguageParser.parse(value or "")
    except JiraServiceError as e:
        raise click.ClickException(f"invalid {name} {value}: {e}")


def _check_story_points(breakdown: Dict[str, str], sub_tasks_arg: Optional[str]) -> None:
    try:
        for points in breakdown.values():
            JiraRequestBuilder.parse_story_points(points)
    except JiraServiceError as e:
        raise click.ClickException(f"invalid sub tasks {sub_tasks_arg}: {e}")


def update_issue(store: ConfigStore, issue_key: str,
                 sub_tasks_arg: Optional[str], fields_arg: Optional[str]) -> None:
    """Fetch the issue, then create sub-tasks and update fields as requested."""
    breakdown = _parse_argument("sub tasks", sub_tasks_arg)
    _check_story_points(breakdown, sub_tasks_arg)
    field_updates = _parse_argument("fields", fields_arg)

    try:
        settings = store.load_settings()
        service = build_service(settings)
    except JiraServiceError as e:
        raise click.ClickException(f"error creating jira client: {e}")

    logger.debug(f"Applying {len(breakdown)} sub-tasks and {len(field_updates)} field updates to {issue_key}")

    with service:
        try:
            issue = service.get_issue(issue_key)
        except JiraServiceError as e:
            raise click.ClickException(f"issue not found {issue_key}: {e}")

        if breakdown:
            create_sub_tasks(service, issue, breakdown, sub_tasks_arg)

        if field_updates:
            update_issue_fields(service, issue, field_updates, fields_arg)


def create_sub_tasks(service: JiraService, parent: Issue,
                     breakdown: Dict[str, str], sub_tasks_arg: str) -> None:
    try:
        result = service.create_sub_tasks_bulk(parent, breakdown)
    except JiraServiceError as e:
        raise click.ClickException(f"error creating sub tasks {sub_tasks_arg}, {parent.key}: {e}")

    click.echo("sub tasks:")
    for issue in result.issues:
        click.echo(issue.key)
    for error in result.errors:
        click.echo(f"warning: sub task not created for {parent.key}: {error}", err=True)


def update_issue_fields(service: JiraService, issue: Issue,
                        field_updates: Dict[str, str], fields_arg: str) -> None:
    try:
        service.update_issue(issue, field_updates)
    except JiraServiceError as e:
        raise click.ClickException(f"error updating issue fields {fields_arg}, {issue.key}: {e}")

    click.echo(f"issue updated {issue.key}")


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=EPILOG
)
@click.version_option(
    __version__, "-v", "--version",
    prog_name="jisub",
    message="%(prog)s version %(version)s",
    help="Print version info"
)
@click.option("-c", "--config", "config_arg", metavar="'SECTION.KEY VALUE'",
              help="Create/Update jira configuration")
@click.option("-st", "--sub-tasks", "sub_tasks_arg", metavar="'LABEL:POINTS ...'",
              help="Sub tasks to create for provided parent issue")
@click.option("-f", "--fields", "fields_arg", metavar="'FIELD:VALUE ...'",
              help="Field name, value to update for provided issue")
@click.option("--config-file", type=click.Path(dir_okay=False), envvar=CONFIG_ENV_VAR,
              help="Configuration file (default: ./jisub/jisub-config.ini)")
@click.option("--debug", is_flag=True, help="Log API traffic to stderr")
@click.argument("issue_key", required=False)
def cli(config_arg: Optional[str], sub_tasks_arg: Optional[str], fields_arg: Optional[str],
        config_file: Optional[str], debug: bool, issue_key: Optional[str]) -> None:
    """Create sub tasks and update fields for the Jira issue ISSUE_KEY."""
    configure_logging(debug)
    store = ConfigStore(config_file)

    if config_arg:
        try:
            store.update_from_argument(config_arg)
        except JiraServiceError as e:
            raise click.ClickException(str(e))
        return

    if not issue_key:
        raise click.UsageError("missing required issue key")

    update_issue(store, issue_key, sub_tasks_arg, fields_arg)


if __name__ == "__main__":
    cli()
