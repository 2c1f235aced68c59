"""
OpenAI provider for LLM models, dood!
"""

import logging

from .basic_openai_provider import BasicOpenAIProvider

logger = logging.getLogger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"


class OpenAIProvider(BasicOpenAIProvider):
    """OpenAI provider, optionally pointed at any compatible endpoint via base-url, dood!"""

    def _getBaseUrl(self) -> str:
        return self.config.get("base-url", OPENAI_BASE_URL)
