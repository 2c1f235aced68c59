"""
Base classes every LLM backend implements, dood!

A provider owns connection settings (api key, endpoint) and a set of named
models. A model knows its id and sampling settings and turns a list of
ModelMessage into a ModelRunResult.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional

from .models import ModelMessage, ModelRunResult


class AbstractModel(ABC):
    """One configured model of a provider"""

    def __init__(
        self,
        provider: "AbstractLLMProvider",
        modelId: str,
        modelVersion: str,
        temperature: float,
        contextSize: int,
        extraConfig: Optional[Dict[str, Any]] = None,
    ):
        self.provider = provider
        self.modelId = modelId
        self.modelVersion = modelVersion
        self.temperature = temperature
        self.contextSize = contextSize

        # Whole [models.models.<name>] section, providers pick what they need
        self._config: Dict[str, Any] = extraConfig or {}
        self.maxTokens: Optional[int] = self._config.get("max_tokens")

    @abstractmethod
    async def generateText(self, messages: Iterable[ModelMessage]) -> ModelRunResult:
        """Run the model on messages (system prompt first), dood!"""

    def getInfo(self) -> Dict[str, Any]:
        return {
            "provider": type(self.provider).__name__,
            "model_id": self.modelId,
            "model_version": self.modelVersion,
            "temperature": self.temperature,
            "context_size": self.contextSize,
            "max_tokens": self.maxTokens,
        }

    def __str__(self) -> str:
        return f"{self.modelId}@{self.modelVersion} via {type(self.provider).__name__}"


class AbstractLLMProvider(ABC):
    """Named models sharing one backend configuration"""

    def __init__(self, config: Dict[str, Any]):
        self.config = config
        self.models: Dict[str, AbstractModel] = {}

    @abstractmethod
    def addModel(
        self,
        name: str,
        modelId: str,
        modelVersion: str,
        temperature: float,
        contextSize: int,
        extraConfig: Optional[Dict[str, Any]] = None,
    ) -> AbstractModel:
        """Create and register model under name, return it, dood!"""

    def getModel(self, name: str) -> Optional[AbstractModel]:
        return self.models.get(name)

    def listModels(self) -> List[str]:
        return list(self.models)

    def deleteModel(self, name: str) -> bool:
        """Forget model, False when there was no such model"""
        return self.models.pop(name, None) is not None

    def __str__(self) -> str:
        return f"{type(self).__name__} ({len(self.models)} models)"
