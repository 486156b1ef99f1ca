"""
ServiceAgent CLI
Entry point for scoring, plan and documentation operations.
"""

import click
from dotenv import load_dotenv

from serviceagent import __version__
from serviceagent.config import settings
from serviceagent.utils.logging import set_log_level

# Load environment variables
load_dotenv()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose):
    """
    ServiceAgent CLI

    Score leads, check plan access and search the in-app documentation.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    # Command output goes to stdout; keep routine log lines out of it
    level = "DEBUG" if verbose else "WARNING"
    settings.LOG_LEVEL = level
    set_log_level(level)


@cli.group()
def scoring():
    """Lead scoring operations"""
    pass


@cli.group()
def plan():
    """Subscription plan operations"""
    pass


@cli.group()
def docs():
    """In-app documentation"""
    pass


# Import command modules
from .commands import docs_commands, plan_commands, scoring_commands  # noqa: E402

# Register command groups
scoring.add_command(scoring_commands.score)
scoring.add_command(scoring_commands.rules)

plan.add_command(plan_commands.check)
plan.add_command(plan_commands.summary)

docs.add_command(docs_commands.search)


if __name__ == "__main__":
    cli()
