"""
YAML parsing and validation module for scoring rules.

The file layout is a ``settings`` block (bounds and the AI-assist flag)
followed by a ``rules`` list, for example::

    settings:
      min_score: 0
      max_score: 100
      ai_assist: true
    rules:
      - id: linkedin
        name: Lead from LinkedIn
        field: source
        operator: equals
        value: LinkedIn
        points: 20
"""

from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import ValidationError

from serviceagent.config import settings as app_settings
from serviceagent.exceptions import ScoringConfigurationError
from serviceagent.utils.logging import get_logger

from .models import ScoreOperator, ScoreRule, ScoringSettings

logger = get_logger(__name__)


class ScoringRulesParser:
    """Parser for YAML scoring rules files."""

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the parser.

        Args:
            config_path: Path to the YAML configuration file.
                        If not provided, uses SCORING_RULES_PATH.
        """
        if config_path is None:
            config_path = app_settings.SCORING_RULES_PATH
        self.config_path = Path(config_path)
        self.config: Optional[ScoringSettings] = None
        logger.info(
            f"Initialized ScoringRulesParser with config path: {self.config_path}"
        )

    def load_and_validate(self) -> ScoringSettings:
        """
        Load and validate the YAML configuration.

        Returns:
            Validated ScoringSettings object.

        Raises:
            FileNotFoundError: If the configuration file doesn't exist.
            yaml.YAMLError: If the YAML is invalid.
            ScoringConfigurationError: If the configuration doesn't match the schema.
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        logger.info(f"Loading scoring rules from: {self.config_path}")

        try:
            with self.config_path.open() as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse YAML file: {e}")
            raise

        if not isinstance(raw_config, dict):
            raise ScoringConfigurationError(
                f"Expected a mapping at the top of {self.config_path}"
            )

        logger.debug(
            f"Loaded raw configuration with {len(raw_config.get('rules') or [])} rules"
        )

        payload = dict(raw_config.get("settings") or {})
        payload["rules"] = raw_config.get("rules") or []

        try:
            self.config = ScoringSettings.from_payload(payload)
        except ScoringConfigurationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise

        logger.info(
            f"Successfully validated configuration: {len(self.config.rules)} rules",
            extra={"ai_assist": self.config.ai_assist},
        )
        return self.config

    def _require_config(self) -> ScoringSettings:
        if not self.config:
            raise RuntimeError(
                "Configuration not loaded. Call load_and_validate() first."
            )
        return self.config

    def get_active_rules(self) -> list[ScoreRule]:
        """
        Get only the active rules, in file order.

        Returns:
            List of active ScoreRule objects.
        """
        config = self._require_config()
        active_rules = config.active_rules
        logger.debug(
            f"Found {len(active_rules)} active rules out of {len(config.rules)} total"
        )
        return active_rules

    def get_settings(self) -> ScoringSettings:
        """
        Get the scoring settings.

        Returns:
            ScoringSettings object.
        """
        return self._require_config()

    def validate_rule_syntax(self, rule_dict: dict[str, Any]) -> bool:
        """
        Validate a single rule dictionary.

        A rule with an operator the evaluator does not know loads fine but
        never scores, so it is reported as invalid here.

        Args:
            rule_dict: Dictionary representing a rule.

        Returns:
            True if valid, False otherwise.
        """
        try:
            rule = ScoreRule.model_validate(rule_dict)
        except ValidationError as e:
            logger.error(f"Rule validation failed: {e}")
            return False

        operators = {op.value for op in ScoreOperator}
        if rule.operator.strip().lower() not in operators:
            logger.error(f"Rule validation failed: unknown operator '{rule.operator}'")
            return False
        return True

    @staticmethod
    def dump_settings(settings: ScoringSettings, path: Union[str, Path]) -> Path:
        """Write settings back out in the layout ``load_and_validate`` reads."""
        data = settings.model_dump(mode="json")
        document = {
            "settings": {
                "min_score": data["min_score"],
                "max_score": data["max_score"],
                "ai_assist": data["ai_assist"],
            },
            "rules": data["rules"],
        }
        path = Path(path)
        with path.open("w") as f:
            yaml.safe_dump(document, f, sort_keys=False)
        logger.info(f"Wrote {len(settings.rules)} scoring rules to {path}")
        return path
