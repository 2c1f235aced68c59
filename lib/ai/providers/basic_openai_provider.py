"""
Chat-completions model and provider base for OpenAI-compatible endpoints, dood!
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from openai import AsyncOpenAI
from openai.types.chat.chat_completion import ChatCompletion

from ..abstract import AbstractLLMProvider, AbstractModel
from ..models import ModelMessage, ModelResultStatus, ModelRunResult

logger = logging.getLogger(__name__)

FINISH_REASON_STATUS: Dict[str, ModelResultStatus] = {
    "stop": ModelResultStatus.FINAL,
    "length": ModelResultStatus.TRUNCATED_FINAL,
    "content_filter": ModelResultStatus.CONTENT_FILTER,
}


class BasicOpenAIModel(AbstractModel):
    """Model served through the chat.completions API, dood!"""

    def __init__(
        self,
        provider: "BasicOpenAIProvider",
        modelId: str,
        modelVersion: str,
        temperature: float,
        contextSize: int,
        openAiClient: AsyncOpenAI,
        extraConfig: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(provider, modelId, modelVersion, temperature, contextSize, extraConfig)
        self._client = openAiClient

    def _getModelId(self) -> str:
        return self.modelId

    def _getExtraParams(self) -> Dict[str, Any]:
        """Optional request parameters, only max_tokens for now"""
        return {"max_tokens": self.maxTokens} if self.maxTokens is not None else {}

    def _buildRequest(self, messages: Iterable[ModelMessage]) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "model": self._getModelId(),
            "messages": [message.toDict("content") for message in messages],
            "temperature": self.temperature,
        }
        request.update(self._getExtraParams())
        return request

    def _checkResponse(self, response: Any) -> None:
        """Raise ValueError unless response is a ChatCompletion with at least one choice"""
        if not isinstance(response, ChatCompletion):
            logger.error(f"{self.modelId}: expected ChatCompletion, got {type(response).__name__}: {response}")
            raise ValueError(f"Invalid response from {self.modelId}: not a chat completion")

        choices: List[Any] = response.choices if isinstance(response.choices, list) else []
        if not choices:
            logger.error(f"{self.modelId}: response has no choices: {response.choices!r}")
            raise ValueError(f"Invalid response from {self.modelId}: no choices")

    async def generateText(self, messages: Iterable[ModelMessage]) -> ModelRunResult:
        """
        Send messages to the chat.completions endpoint, dood!

        Raises:
            RuntimeError: client is missing
            ValueError: response does not look like a chat completion
            openai.OpenAIError: transport and API errors, unchanged
        """
        if not self._client:
            raise RuntimeError("OpenAI client not initialized, dood!")

        try:
            response = await self._client.chat.completions.create(**self._buildRequest(messages))
            self._checkResponse(response)
        except Exception as e:
            logger.error(f"Error running OpenAI-compatible model {self.modelId}: {e}")
            raise

        choice = response.choices[0]
        status = FINISH_REASON_STATUS.get(choice.finish_reason, ModelResultStatus.UNKNOWN)
        if status == ModelResultStatus.UNKNOWN:
            logger.warning(f"Unknown LLM finish reason: {choice.finish_reason}")

        return ModelRunResult(response, status, choice.message.content or "")


class BasicOpenAIProvider(AbstractLLMProvider):
    """
    Provider owning one AsyncOpenAI client shared by all its models, dood!

    Config keys: ``api-key`` (required), ``timeout`` (seconds, optional).
    Subclasses decide the endpoint in _getBaseUrl().
    """

    def __init__(self, config: Dict[str, Any]):
        super().__init__(config)
        self._client: Optional[AsyncOpenAI] = None

        clientParams: Dict[str, Any] = {"api_key": self._getApiKey(), "base_url": self._getBaseUrl()}
        clientParams.update(self._getClientParams())
        self._client = AsyncOpenAI(**clientParams)
        logger.info(f"{self.__class__.__name__} initialized with {clientParams['base_url']}, dood!")

    def _getBaseUrl(self) -> str:
        raise NotImplementedError("Subclasses must implement _getBaseUrl, dood!")

    def _getApiKey(self) -> str:
        apiKey = self.config.get("api-key")
        if not apiKey:
            raise ValueError("api-key is required for OpenAI-compatible provider, dood!")
        return apiKey

    def _getClientParams(self) -> Dict[str, Any]:
        timeout = self.config.get("timeout", None)
        return {"timeout": timeout} if timeout is not None else {}

    def _createModelInstance(
        self,
        name: str,
        modelId: str,
        modelVersion: str,
        temperature: float,
        contextSize: int,
        extraConfig: Optional[Dict[str, Any]] = None,
    ) -> AbstractModel:
        if not self._client:
            raise RuntimeError("OpenAI client not initialized, dood!")

        return BasicOpenAIModel(
            provider=self,
            modelId=modelId,
            modelVersion=modelVersion,
            temperature=temperature,
            contextSize=contextSize,
            openAiClient=self._client,
            extraConfig=extraConfig,
        )

    def addModel(
        self,
        name: str,
        modelId: str,
        modelVersion: str,
        temperature: float,
        contextSize: int,
        extraConfig: Optional[Dict[str, Any]] = None,
    ) -> AbstractModel:
        """Register model under name, an existing name returns the registered model"""
        if name in self.models:
            logger.warning(f"Model {name} already exists in {self.__class__.__name__}, dood!")
            return self.models[name]

        model = self._createModelInstance(name, modelId, modelVersion, temperature, contextSize, extraConfig)
        self.models[name] = model
        logger.info(f"Added {self.__class__.__name__} model {name} ({modelId}), dood!")
        return model
