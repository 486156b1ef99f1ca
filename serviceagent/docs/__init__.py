from .documentation_service import (
    DocumentationCatalog,
    DocumentationSection,
    OnboardingStep,
    TooltipContent,
)

__all__ = [
    "DocumentationCatalog",
    "DocumentationSection",
    "OnboardingStep",
    "TooltipContent",
]
