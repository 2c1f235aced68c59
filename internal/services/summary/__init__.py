"""Weather summary service, dood!"""

from .providers import (
    RULE_BASED_PROVIDER,
    LLMSummaryProvider,
    RuleBasedSummaryProvider,
    buildChatPrompt,
    buildCompletionPrompt,
    buildSummaryProviders,
)
from .service import DEFAULT_SUMMARY_TTL, UNAVAILABLE_SUMMARY, SummaryResolver
from .types import ForecastPoint, SummaryInput, SummaryProviderError, SummaryProviderInterface

__all__ = [
    "ForecastPoint",
    "SummaryInput",
    "SummaryProviderError",
    "SummaryProviderInterface",
    "LLMSummaryProvider",
    "RuleBasedSummaryProvider",
    "RULE_BASED_PROVIDER",
    "buildChatPrompt",
    "buildCompletionPrompt",
    "buildSummaryProviders",
    "SummaryResolver",
    "UNAVAILABLE_SUMMARY",
    "DEFAULT_SUMMARY_TTL",
]
