"""Command-line interface for zipmerge."""

from __future__ import annotations

from pathlib import Path

import click
import structlog
from httpx import AsyncClient
from pydantic import ValidationError
from safir.asyncio import run_with_asyncio
from safir.datetime import current_datetime, format_datetime_for_logging
from safir.logging import configure_logging
from safir.slack.blockkit import SlackException, SlackMessage, SlackTextField
from safir.slack.webhook import SlackWebhookClient
from structlog.stdlib import BoundLogger

from .config import Configuration
from .factory import Factory

__all__ = ["main"]


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s")
def main() -> None:
    """Import zip archives into a git repository as merge requests."""


@main.command()
@click.argument("topic", default=None, required=False, nargs=1)
@click.pass_context
def help(ctx: click.Context, topic: str | None) -> None:
    """Show help for any command."""
    # The help command implementation is taken from
    # https://www.burgundywall.com/post/having-click-help-subcommand
    if topic:
        if topic in main.commands:
            click.echo(main.commands[topic].get_help(ctx))
        else:
            raise click.UsageError(f"Unknown help topic {topic}", ctx)
    else:
        if not ctx.parent:
            raise RuntimeError("help somehow called without parent or topic")
        click.echo(ctx.parent.get_help())


@main.command()
@click.option(
    "-c",
    "--config-path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="ZIPMERGE_CONFIG_PATH",
    default=None,
    help="YAML configuration file; the environment fills in the rest",
)
@click.option(
    "-w",
    "--work-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding zips/ and repository/ (default: cwd)",
)
@run_with_asyncio
async def run(config_path: Path | None, work_dir: Path | None) -> None:
    """Import every archive in the intake directory."""
    try:
        if config_path:
            config = Configuration.from_file(config_path)
        else:
            config = Configuration()
    except ValidationError as e:
        raise click.UsageError(f"Invalid configuration: {e!s}") from e
    if work_dir:
        config = config.model_copy(update={"work_dir": work_dir})

    configure_logging(
        name="zipmerge", profile=config.profile, log_level=config.log_level
    )
    logger = structlog.get_logger("zipmerge")

    async with AsyncClient(timeout=config.http_timeout) as http_client:
        factory = Factory(config, http_client, logger)
        importer = factory.create_importer()
        try:
            await importer.run()
        except Exception as e:
            logger.exception("Import run failed", state=importer.state)
            slack = factory.create_slack_webhook_client()
            await _alert(slack, e, logger)
            raise click.exceptions.Exit(1) from e


async def _alert(
    slack: SlackWebhookClient | None, exc: Exception, logger: BoundLogger
) -> None:
    """Report a fatal error to Slack if alerting is configured."""
    if not slack:
        logger.debug("Alert hook isn't set, so not sending to Slack")
        return

    if isinstance(exc, SlackException):
        await slack.post(exc.to_slack())
    else:
        now = current_datetime(microseconds=True)
        date = format_datetime_for_logging(now)
        message = SlackMessage(
            message=f"Unexpected exception {type(exc).__name__}: {exc!s}",
            fields=[SlackTextField(heading="Date", text=date)],
        )
        await slack.post(message)
