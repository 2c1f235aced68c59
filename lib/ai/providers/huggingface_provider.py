"""
Hugging Face Inference API provider for LLM models, dood!
"""

import logging
from typing import Any, Dict, Iterable, Optional

import httpx

from ..abstract import AbstractLLMProvider, AbstractModel
from ..models import ModelMessage, ModelResultStatus, ModelRunResult

logger = logging.getLogger(__name__)

HUGGINGFACE_BASE_URL = "https://api-inference.huggingface.co/models"


class HuggingFaceModel(AbstractModel):
    """Text-generation model served by the Hugging Face Inference API, dood!

    The inference API takes a single prompt string, so chat messages are
    flattened into one block of text. Both ``[{"generated_text": ...}]`` and
    ``{"generated_text": ...}`` bodies are accepted.
    """

    def __init__(
        self,
        provider: "HuggingFaceProvider",
        modelId: str,
        modelVersion: str,
        temperature: float,
        contextSize: int,
        extraConfig: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(provider, modelId, modelVersion, temperature, contextSize, extraConfig)
        self._provider = provider

    def _buildPrompt(self, messages: Iterable[ModelMessage]) -> str:
        return "\n\n".join(message.content for message in messages if message.content)

    def _buildPayload(self, prompt: str) -> Dict[str, Any]:
        parameters: Dict[str, Any] = {
            "temperature": self.temperature,
            "do_sample": True,
            "return_full_text": False,
            "repetition_penalty": self._config.get("repetition_penalty", 1.1),
        }
        if self.maxTokens is not None:
            parameters["max_length"] = self.maxTokens
        return {"inputs": prompt, "parameters": parameters}

    @staticmethod
    def _extractText(body: Any) -> Optional[str]:
        if isinstance(body, list) and body and isinstance(body[0], dict):
            text = body[0].get("generated_text")
        elif isinstance(body, dict):
            text = body.get("generated_text")
        else:
            text = None
        return text.strip() if isinstance(text, str) else None

    async def generateText(self, messages: Iterable[ModelMessage]) -> ModelRunResult:
        """Run the model with given messages, dood!

        Raises:
            ValueError: On non-2xx status or unexpected response body
            httpx.HTTPError: On timeout or transport failure
        """
        url = f"{self._provider.baseUrl}/{self.modelId}"
        payload = self._buildPayload(self._buildPrompt(messages))

        try:
            # Create new session for each request
            async with httpx.AsyncClient(timeout=self._provider.timeout) as session:
                response = await session.post(
                    url,
                    json=payload,
                    headers={"Authorization": f"Bearer {self._provider.apiKey}"},
                )

            if response.status_code != 200:
                logger.error(f"Hugging Face request to {self.modelId} failed: {response.status_code}")
                raise ValueError(f"Hugging Face API error: {response.status_code}")

            body = response.json()
            text = self._extractText(body)
            if text is None:
                logger.error(f"Unexpected Hugging Face response for {self.modelId}: {body}")
                raise ValueError("Unexpected response format from Hugging Face")

            return ModelRunResult(body, ModelResultStatus.FINAL, text)

        except Exception as e:
            logger.error(f"Error running Hugging Face model {self.modelId}: {e}")
            raise


class HuggingFaceProvider(AbstractLLMProvider):
    """Hugging Face Inference API provider, dood!"""

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        apiKey = config.get("api-key")
        if not apiKey:
            raise ValueError("api-key is required for Hugging Face provider, dood!")

        self.apiKey: str = apiKey
        self.baseUrl: str = config.get("base-url", HUGGINGFACE_BASE_URL).rstrip("/")
        self.timeout: float = config.get("timeout", 30)
        logger.info(f"{self.__class__.__name__} initialized, dood!")

    def addModel(
        self,
        name: str,
        modelId: str,
        modelVersion: str,
        temperature: float,
        contextSize: int,
        extraConfig: Optional[Dict[str, Any]] = None,
    ) -> AbstractModel:
        """Add a Hugging Face hosted model, dood!"""
        if name in self.models:
            logger.warning(f"Model {name} already exists in {self.__class__.__name__}, dood!")
            return self.models[name]

        model = HuggingFaceModel(
            provider=self,
            modelId=modelId,
            modelVersion=modelVersion,
            temperature=temperature,
            contextSize=contextSize,
            extraConfig=extraConfig,
        )
        self.models[name] = model
        logger.info(f"Added {self.__class__.__name__} model {name} ({modelId}), dood!")
        return model
