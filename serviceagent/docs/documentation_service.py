"""
In-app documentation catalog: tooltips, help sections and onboarding steps.

Callers construct a ``DocumentationCatalog``, call ``initialize()`` once
and pass the instance to whatever needs it.
"""

from pathlib import Path
from typing import Any, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from serviceagent.config import settings
from serviceagent.utils.logging import get_logger

logger = get_logger(__name__)


class _DocModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TooltipContent(_DocModel):
    id: str
    content: str
    title: Optional[str] = None


class DocumentationSection(_DocModel):
    id: str
    title: str
    content: str
    subsections: list["DocumentationSection"] = Field(default_factory=list)

    def matches(self, query: str) -> bool:
        """Case-insensitive match on title or content, here or in a subsection."""
        if query in self.title.lower() or query in self.content.lower():
            return True
        return any(sub.matches(query) for sub in self.subsections)


class OnboardingStep(_DocModel):
    id: str
    title: str
    description: str
    content: str
    icon: str
    is_optional: bool = False


class DocumentationCatalog:
    """Lookup and search over the in-app help content."""

    def __init__(self):
        self._tooltips: dict[str, TooltipContent] = {}
        self._sections: dict[str, DocumentationSection] = {}
        self._onboarding_steps: list[OnboardingStep] = []
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(
        self, content: Optional[Union[str, Path, Mapping[str, Any]]] = None
    ) -> "DocumentationCatalog":
        """
        Load tooltips, sections and onboarding steps.

        Args:
            content: A mapping with ``tooltips``, ``sections`` and
                ``onboarding`` lists, or a path to a YAML file holding one.
                Defaults to DOCUMENTATION_PATH.

        Returns:
            self, for chaining
        """
        if content is None:
            content = settings.DOCUMENTATION_PATH
        if not isinstance(content, Mapping):
            content = self._load_yaml(Path(content))

        self._tooltips = {}
        self._sections = {}
        self._initialized = True

        for tooltip in content.get("tooltips") or []:
            self.add_tooltip(tooltip)
        for section in content.get("sections") or []:
            self.add_section(section)
        self.set_onboarding_steps(content.get("onboarding") or [])

        logger.info(
            f"Loaded documentation: {len(self._tooltips)} tooltips, "
            f"{len(self._sections)} sections, "
            f"{len(self._onboarding_steps)} onboarding steps"
        )
        return self

    @staticmethod
    def _load_yaml(path: Path) -> Mapping[str, Any]:
        if not path.exists():
            raise FileNotFoundError(f"Documentation file not found: {path}")
        logger.debug(f"Loading documentation from: {path}")
        with path.open() as f:
            return yaml.safe_load(f) or {}

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError(
                "Documentation catalog not initialized. Call initialize() first."
            )

    def add_tooltip(self, tooltip: Union[TooltipContent, Mapping[str, Any]]) -> None:
        self._require_initialized()
        tooltip = TooltipContent.model_validate(tooltip)
        self._tooltips[tooltip.id] = tooltip

    def get_tooltip(self, tooltip_id: str) -> Optional[TooltipContent]:
        self._require_initialized()
        return self._tooltips.get(tooltip_id)

    def add_section(
        self, section: Union[DocumentationSection, Mapping[str, Any]]
    ) -> None:
        """Add a section, replacing any existing section with the same id."""
        self._require_initialized()
        section = DocumentationSection.model_validate(section)
        self._sections[section.id] = section

    def get_section(self, section_id: str) -> Optional[DocumentationSection]:
        self._require_initialized()
        return self._sections.get(section_id)

    def get_all_sections(self) -> list[DocumentationSection]:
        self._require_initialized()
        return list(self._sections.values())

    def set_onboarding_steps(
        self, steps: list[Union[OnboardingStep, Mapping[str, Any]]]
    ) -> None:
        self._require_initialized()
        self._onboarding_steps = [OnboardingStep.model_validate(s) for s in steps]

    def get_onboarding_steps(self) -> list[OnboardingStep]:
        self._require_initialized()
        return list(self._onboarding_steps)

    def search(self, query: str) -> list[DocumentationSection]:
        """
        Find sections whose title or content, or any subsection's, contains
        ``query`` (case-insensitive). Results keep insertion order.
        """
        self._require_initialized()
        normalized = query.lower()
        return [s for s in self._sections.values() if s.matches(normalized)]
