"""
Tests for summary providers and provider list construction.
"""

from unittest.mock import AsyncMock, Mock

import pytest

from internal.services.summary import (
    LLMSummaryProvider,
    RuleBasedSummaryProvider,
    SummaryInput,
    SummaryProviderError,
    buildChatPrompt,
    buildCompletionPrompt,
    buildSummaryProviders,
)
from internal.services.summary.types import ForecastPoint
from lib.ai.models import ModelResultStatus, ModelRunResult
from lib.openweathermap.models import AirQualitySnapshot, ConditionsSnapshot, WeatherPayload


def makeInput(**overrides) -> SummaryInput:
    values = dict(
        location="London",
        temperature=18,
        condition="clear",
        windSpeed=2.0,
        humidity=55,
        pressure=1013,
        forecast=(ForecastPoint("2023-10-18 15:00", 17, "few clouds"),),
        airQuality=None,
    )
    values.update(overrides)
    return SummaryInput(**values)


class TestSummaryInput:
    def test_from_payload_limits_forecast(self):
        current = ConditionsSnapshot(1697644800, 18.2, 17.5, 55, 1015, 4.1, 240, "clear", "01d", "London")
        forecast = tuple(
            ConditionsSnapshot(1697655600 + i * 10800, 17.0, 16.0, 60, 1014, 3.0, 220, f"cond{i}", "02d")
            for i in range(8)
        )
        payload = WeatherPayload(current, forecast, AirQualitySnapshot(2, 7.5, 12.1))

        data = SummaryInput.fromPayload(payload)

        assert data.location == "London"
        assert data.temperature == 18.2
        assert len(data.forecast) == 5
        assert data.forecast[0].label == "2023-10-18 19:00"
        assert data.forecast[4].condition == "cond4"
        assert data.airQuality is not None and data.airQuality.aqi == 2


class TestRuleBasedSummaryProvider:
    """Deterministic fallback"""

    @pytest.mark.asyncio
    async def test_moderate_comfortable_calm(self):
        summary = await RuleBasedSummaryProvider().generateSummary(makeInput())

        assert summary.startswith("The current weather in London shows 18°C with clear.")
        assert "This moderate temperature with moderate humidity (55%)" in summary
        assert "Calm winds" in summary
        assert "expect few clouds in the coming hours" in summary

    @pytest.mark.asyncio
    async def test_warm_muggy_strong(self):
        summary = await RuleBasedSummaryProvider().generateSummary(
            makeInput(temperature=30, humidity=80, windSpeed=9.5, pressure=1025)
        )

        assert "This warm temperature combined with high humidity (80%)" in summary
        assert "Strong winds at 9.5 m/s" in summary
        assert "High atmospheric pressure" in summary
        assert "Looking ahead" not in summary

    @pytest.mark.asyncio
    async def test_cool_dry_light_low_pressure(self):
        summary = await RuleBasedSummaryProvider().generateSummary(
            makeInput(temperature=5, humidity=30, windSpeed=5, pressure=990)
        )

        assert "These cool conditions with low humidity (30%)" in summary
        assert "Light winds of 5 m/s" in summary
        assert "Low pressure" in summary

    @pytest.mark.asyncio
    async def test_band_boundaries(self):
        """Thresholds are strict: 25, 70, 8 and 1020 stay in the middle band"""
        summary = await RuleBasedSummaryProvider().generateSummary(
            makeInput(temperature=25, humidity=70, windSpeed=8, pressure=1020)
        )

        assert "This moderate temperature with moderate humidity" in summary
        assert "Light winds of 8 m/s" in summary
        assert "expect few clouds" in summary

    @pytest.mark.asyncio
    async def test_normal_pressure_without_forecast(self):
        summary = await RuleBasedSummaryProvider().generateSummary(makeInput(forecast=()))

        assert summary.endswith("Calm winds mean little air movement.")


class TestLLMSummaryProvider:
    """Model-backed providers"""

    @pytest.mark.asyncio
    async def test_returns_model_text(self):
        model = Mock()
        model.generateText = AsyncMock(return_value=ModelRunResult({}, ModelResultStatus.FINAL, " Mild and clear. "))
        provider = LLMSummaryProvider("openai-summary", model)

        assert await provider.generateSummary(makeInput()) == "Mild and clear."
        messages = model.generateText.call_args.args[0]
        assert messages[0].role == "system"
        assert "for London" in messages[1].content

    @pytest.mark.asyncio
    async def test_missing_model_raises_provider_error(self):
        with pytest.raises(SummaryProviderError, match="not configured"):
            await LLMSummaryProvider("openai-summary", None).generateSummary(makeInput())

    @pytest.mark.asyncio
    async def test_model_exception_wrapped(self):
        model = Mock()
        model.generateText = AsyncMock(side_effect=RuntimeError("rate limited"))

        with pytest.raises(SummaryProviderError) as excInfo:
            await LLMSummaryProvider("huggingface-summary", model).generateSummary(makeInput())

        assert excInfo.value.provider == "huggingface-summary"
        assert "rate limited" in str(excInfo.value)

    @pytest.mark.asyncio
    async def test_unusable_result_raises(self):
        model = Mock()
        model.generateText = AsyncMock(return_value=ModelRunResult({}, ModelResultStatus.CONTENT_FILTER, ""))

        with pytest.raises(SummaryProviderError, match="CONTENT_FILTER"):
            await LLMSummaryProvider("openai-summary", model).generateSummary(makeInput())


class TestPrompts:
    def test_chat_prompt_contains_conditions(self):
        data = makeInput(airQuality=AirQualitySnapshot(3, 12.5, 20.0))
        messages = buildChatPrompt(data)

        assert len(messages) == 2
        userText = messages[1].content
        assert "- Temperature: 18°C" in userText
        assert "- Humidity: 55%" in userText
        assert "Next few periods: few clouds 17°C" in userText
        assert "Air Quality: AQI 3, PM2.5: 12.5" in userText

    def test_completion_prompt_is_single_message(self):
        messages = buildCompletionPrompt(makeInput())

        assert len(messages) == 1
        assert messages[0].content.startswith("Weather Analysis for London:")
        assert "Forecast: few clouds 17°C" in messages[0].content


class TestBuildSummaryProviders:
    def makeManager(self, models):
        manager = Mock()
        manager.config = {
            "models": {
                "openai-summary": {"prompt": "chat"},
                "huggingface-summary": {"prompt": "completion"},
            }
        }
        manager.getModel = Mock(side_effect=lambda name: models.get(name))
        return manager

    def test_full_chain(self):
        manager = self.makeManager({"openai-summary": Mock(), "huggingface-summary": Mock()})

        providers = buildSummaryProviders(manager, {})

        assert [p.name for p in providers] == ["openai-summary", "huggingface-summary", "rule-based"]
        assert providers[0].promptBuilder is buildChatPrompt
        assert providers[1].promptBuilder is buildCompletionPrompt

    def test_unconfigured_providers_are_skipped(self):
        manager = self.makeManager({"huggingface-summary": Mock()})

        providers = buildSummaryProviders(manager, {})

        assert [p.name for p in providers] == ["huggingface-summary", "rule-based"]

    def test_without_llm_manager(self):
        providers = buildSummaryProviders(None, {"providers": ["openai-summary", "rule-based"]})

        assert len(providers) == 1
        assert isinstance(providers[0], RuleBasedSummaryProvider)
