"""
Summary providers: LLM-backed and the deterministic rule-based fallback, dood!
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from lib.ai.abstract import AbstractModel
from lib.ai.manager import LLMManager
from lib.ai.models import ModelMessage

from .types import SummaryInput, SummaryProviderError, SummaryProviderInterface

logger = logging.getLogger(__name__)

RULE_BASED_PROVIDER = "rule-based"
DEFAULT_PROVIDERS_ORDER = ["openai-summary", "huggingface-summary", RULE_BASED_PROVIDER]

SYSTEM_PROMPT = (
    "You are a professional weather analyst explaining weather conditions. "
    "Write exactly 3-4 sentences describing the current situation, what to expect next "
    "and the practical implications. Be informative yet accessible."
)

PromptBuilder = Callable[[SummaryInput], List[ModelMessage]]


def formatNumber(value: float) -> str:
    """18.0 -> "18", 18.25 -> "18.3" """
    return f"{round(float(value), 1):g}"


def _forecastText(data: SummaryInput, prefix: str) -> str:
    if not data.forecast:
        return ""
    items = ", ".join(f"{point.condition} {formatNumber(point.temperature)}°C" for point in data.forecast)
    return f"{prefix}: {items}"


def buildChatPrompt(data: SummaryInput) -> List[ModelMessage]:
    """System + user messages for chat-completion models"""
    lines = [
        f"Analyze and explain the weather conditions for {data.location}:",
        "",
        "Current Conditions:",
        f"- Temperature: {formatNumber(data.temperature)}°C",
        f"- Weather: {data.condition}",
        f"- Wind: {formatNumber(data.windSpeed)} m/s",
        f"- Humidity: {data.humidity}%",
        f"- Pressure: {data.pressure} hPa",
        "",
    ]
    forecastText = _forecastText(data, "Next few periods")
    if forecastText:
        lines.append(forecastText)
    if data.airQuality is not None:
        lines.append(
            f"Air Quality: AQI {data.airQuality.aqi}, PM2.5: {formatNumber(data.airQuality.pm25)} μg/m³"
        )
    lines.append("")
    lines.append("Explain what these conditions mean and what to expect.")

    return [
        ModelMessage(role="system", content=SYSTEM_PROMPT),
        ModelMessage(role="user", content="\n".join(lines)),
    ]


def buildCompletionPrompt(data: SummaryInput) -> List[ModelMessage]:
    """Single prompt for plain text-generation models"""
    text = (
        f"Weather Analysis for {data.location}:\n\n"
        f"Current conditions show {formatNumber(data.temperature)}°C with {data.condition}. "
        f"Wind is {formatNumber(data.windSpeed)} m/s, humidity at {data.humidity}%, "
        f"and pressure is {data.pressure} hPa. {_forecastText(data, 'Forecast')}\n\n"
        "Detailed weather explanation (3-4 sentences):"
    )
    return [ModelMessage(role="user", content=text)]


PROMPT_BUILDERS: Dict[str, PromptBuilder] = {
    "chat": buildChatPrompt,
    "completion": buildCompletionPrompt,
}


class LLMSummaryProvider(SummaryProviderInterface):
    """Summary produced by a configured LLM model, dood"""

    def __init__(self, name: str, model: Optional[AbstractModel], promptBuilder: PromptBuilder = buildChatPrompt):
        self.name = name
        self.model = model
        self.promptBuilder = promptBuilder

    async def generateSummary(self, data: SummaryInput) -> str:
        if self.model is None:
            raise SummaryProviderError(self.name, "model is not configured")

        try:
            result = await self.model.generateText(self.promptBuilder(data))
        except Exception as e:
            raise SummaryProviderError(self.name, str(e)) from e

        if not result.isUsable():
            raise SummaryProviderError(self.name, f"unusable result with status {result.status.name}")

        return result.resultText.strip()


class RuleBasedSummaryProvider(SummaryProviderInterface):
    """Deterministic offline summary, never raises"""

    name = RULE_BASED_PROVIDER

    async def generateSummary(self, data: SummaryInput) -> str:
        return self.describe(data)

    @staticmethod
    def describe(data: SummaryInput) -> str:
        temp = formatNumber(data.temperature)
        parts = [f"The current weather in {data.location} shows {temp}°C with {data.condition}."]

        if data.temperature > 25:
            opener = "This warm temperature"
        elif data.temperature < 10:
            opener = "These cool conditions"
        else:
            opener = "This moderate temperature"

        if data.humidity > 70:
            parts.append(f"{opener} combined with high humidity ({data.humidity}%) will feel muggy.")
        elif data.humidity < 40:
            parts.append(f"{opener} with low humidity ({data.humidity}%) makes for dry, crisp conditions.")
        else:
            parts.append(f"{opener} with moderate humidity ({data.humidity}%) should feel comfortable.")

        wind = formatNumber(data.windSpeed)
        if data.windSpeed > 8:
            parts.append(f"Strong winds at {wind} m/s may affect outdoor activities.")
        elif data.windSpeed > 3:
            parts.append(f"Light winds of {wind} m/s provide a gentle breeze.")
        else:
            parts.append("Calm winds mean little air movement.")

        if data.pressure > 1020:
            parts.append("High atmospheric pressure suggests stable, clear weather.")
        elif data.pressure < 1000:
            parts.append("Low pressure indicates changing weather or possible storms.")
        elif data.forecast:
            parts.append(f"Looking ahead, expect {data.forecast[0].condition} in the coming hours.")

        return " ".join(parts)


def buildSummaryProviders(
    llmManager: Optional[LLMManager], config: Dict[str, Any]
) -> Sequence[SummaryProviderInterface]:
    """
    Build ordered provider list from the [summary] config section, dood.

    Entries of ``providers`` are LLM model names known to the manager, or
    "rule-based". Models that are missing (for example because their
    provider has no api-key) are skipped with a log line.
    """
    order: List[str] = config.get("providers", DEFAULT_PROVIDERS_ORDER)
    modelsConfig: Dict[str, Dict[str, Any]] = llmManager.config.get("models", {}) if llmManager else {}

    providers: List[SummaryProviderInterface] = []
    for name in order:
        if name == RULE_BASED_PROVIDER:
            providers.append(RuleBasedSummaryProvider())
            continue

        model = llmManager.getModel(name) if llmManager else None
        if model is None:
            logger.info(f"Summary provider {name} is not configured, skipping it")
            continue

        promptStyle = modelsConfig.get(name, {}).get("prompt", "chat")
        promptBuilder = PROMPT_BUILDERS.get(promptStyle)
        if promptBuilder is None:
            logger.warning(f"Unknown prompt style {promptStyle} for {name}, using chat")
            promptBuilder = buildChatPrompt
        providers.append(LLMSummaryProvider(name, model, promptBuilder))

    # Local provider is the terminal fallback whatever the config says
    if not any(isinstance(provider, RuleBasedSummaryProvider) for provider in providers):
        providers.append(RuleBasedSummaryProvider())

    logger.info(f"Summary providers: {[provider.name for provider in providers]}")
    return providers
