"""Subscription plan command implementations"""

import sys

import click

from serviceagent.config.plan_config import get_plan_rank, get_plan_summary
from serviceagent.services.plan_service import has_access

# Spellings of "no subscription" accepted on the command line
NO_PLAN_VALUES = ("", "none", "null", "-")


@click.command()
@click.argument("current")
@click.argument("required")
def check(current: str, required: str):
    """Check whether plan CURRENT satisfies plan REQUIRED (exit 1 if denied)"""
    current_plan = None if current.strip().lower() in NO_PLAN_VALUES else current
    granted = has_access(current_plan, required)

    click.echo(
        f"{'granted' if granted else 'denied'}: "
        f"{current_plan or 'no plan'} (rank {get_plan_rank(current_plan)}) "
        f"vs {required.upper()} (rank {get_plan_rank(required)})"
    )
    if not granted:
        sys.exit(1)


@click.command()
def summary():
    """Show the plan table"""
    click.echo(f"{'Plan':<10}{'Rank':>6}{'Candidates':>12}  Description")
    for key, info in get_plan_summary().items():
        click.echo(
            f"{key:<10}{info['rank']:>6}{info['candidate_limit']:>12}  "
            f"{info['description']}"
        )
