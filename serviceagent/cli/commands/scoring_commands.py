"""Lead scoring command implementations"""

import json
from pathlib import Path
from typing import Optional

import click

from serviceagent.config import settings
from serviceagent.exceptions import ScoringConfigurationError
from serviceagent.scoring import (
    ScoringEngine,
    ScoringSettings,
    get_default_scoring_settings,
    get_score_category,
)


def _build_engine(rules_path: Optional[str], no_ai: bool = False) -> ScoringEngine:
    """Engine over the given rules file, the configured file, or the defaults."""
    if rules_path is None and not Path(settings.SCORING_RULES_PATH).exists():
        engine = ScoringEngine(settings=get_default_scoring_settings())
    else:
        engine = ScoringEngine(config_path=rules_path)

    try:
        loaded: ScoringSettings = engine.load_rules()
    except (FileNotFoundError, ScoringConfigurationError) as e:
        raise click.ClickException(str(e))

    if no_ai and loaded.ai_assist:
        engine.settings = loaded.model_copy(update={"ai_assist": False})
    return engine


def _read_lead(lead_json: str) -> dict:
    """Lead data from a JSON string, or from a file when given a path."""
    source = lead_json
    path = Path(lead_json)
    if not lead_json.lstrip().startswith("{") and path.is_file():
        source = path.read_text()

    try:
        data = json.loads(source)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="LEAD_JSON")
    if not isinstance(data, dict):
        raise click.BadParameter("expected a JSON object", param_hint="LEAD_JSON")
    return data


@click.command()
@click.argument("lead_json")
@click.option("--rules", "rules_path", help="Path to a scoring rules YAML file")
@click.option("--no-ai", is_flag=True, help="Skip the AI-assist adjustments")
def score(lead_json: str, rules_path: Optional[str], no_ai: bool):
    """Score one lead given as a JSON object or a path to a JSON file"""
    engine = _build_engine(rules_path, no_ai=no_ai)
    lead = _read_lead(lead_json)

    try:
        scored = engine.score_lead(lead)
    except ValueError as e:
        raise click.ClickException(f"Invalid lead: {e}")

    output = scored.model_dump(mode="json", by_alias=True)
    output["category"] = get_score_category(scored.score)
    click.echo(json.dumps(output, indent=2))


@click.command()
@click.option("--rules", "rules_path", help="Path to a scoring rules YAML file")
def rules(rules_path: Optional[str]):
    """Show statistics about the loaded scoring rules"""
    engine = _build_engine(rules_path)
    stats = engine.get_rule_statistics()

    click.echo(f"Rules: {stats['active_rules']} active / {stats['total_rules']} total")
    click.echo(
        f"  positive: {stats['positive_rules']}, "
        f"negative: {stats['negative_rules']}, "
        f"neutral: {stats['neutral_rules']}"
    )
    bounds = stats["settings"]
    click.echo(f"Score range: {bounds['min_score']}..{bounds['max_score']}")
    click.echo(f"AI assist: {'on' if bounds['ai_assist'] else 'off'}")

    for rule in engine.settings.rules:
        marker = " " if rule.active else "x"
        click.echo(
            f"  [{marker}] {rule.points:+d} {rule.name or rule.id}: "
            f"{rule.field} {rule.operator} {rule.value!r}"
        )
