"""
LLM Manager for coordinating multiple LLM providers and models, dood!
"""

import logging
from typing import Any, Dict, List, Optional

from .abstract import AbstractLLMProvider, AbstractModel
from .providers.huggingface_provider import HuggingFaceProvider
from .providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)


class LLMManager:
    """Manager for LLM providers and models, dood!

    Providers without an ``api-key`` are skipped: a model that points at such
    a provider is simply not registered, and ``getModel()`` returns None.
    """

    def __init__(self, config: Dict[str, Any]):
        """Initialize LLM manager with configuration, dood!

        Args:
            config: Configuration dictionary with providers and models
        """
        self.config = config
        self.providers: Dict[str, AbstractLLMProvider] = {}
        self.modelRegistry: Dict[str, str] = {}  # model_name -> provider_name

        # Initialize providers
        self._initProviders()

        # Add models from config
        self._initModels()

    def _initProviders(self):
        """Initialize known providers from config, dood!"""
        providersConfig: Dict[str, Dict[str, Any]] = self.config.get("providers", {})

        providerTypes = {
            "openai": OpenAIProvider,
            "huggingface": HuggingFaceProvider,
        }

        for providerName, providerConfig in providersConfig.items():
            try:
                providerType = providerConfig.get("type", None)
                if providerType is None:
                    raise ValueError(f"Provider type is not specified for provider {providerName}, dood!")
                if providerType not in providerTypes:
                    raise ValueError(f"Unknown provider type {providerType} for provider {providerName}, dood!")

                apiKey = str(providerConfig.get("api-key") or "")
                # Unresolved ${VAR} means the variable is not set
                if not apiKey or apiKey.startswith("${"):
                    logger.info(f"No api-key for {providerName} provider, skipping it, dood!")
                    continue

                self.providers[providerName] = providerTypes[providerType](providerConfig)
                logger.info(f"Initialized {providerName} provider with type {providerType}, dood!")
            except Exception as e:
                logger.error(f"Failed to initialize {providerName} provider: {e}")

    def _initModels(self):
        """Initialize models from config, dood!"""
        modelsConfig: Dict[str, Dict[str, Any]] = self.config.get("models", {})

        for modelName, modelConfig in modelsConfig.items():
            try:
                if not modelConfig.get("enabled", True):
                    logger.debug(f"Model {modelName} is disabled, dood!")
                    continue

                providerName = modelConfig["provider"]
                modelId = modelConfig["model_id"]
                modelVersion = modelConfig.get("model_version", "latest")
                temperature = modelConfig.get("temperature", 0.6)
                contextSize = modelConfig.get("context", 4096)

                if providerName not in self.providers:
                    logger.warning(f"Provider {providerName} not available for model {modelName}, dood!")
                    continue

                provider = self.providers[providerName]
                provider.addModel(
                    name=modelName,
                    modelId=modelId,
                    modelVersion=modelVersion,
                    temperature=temperature,
                    contextSize=contextSize,
                    extraConfig=modelConfig,
                )

                self.modelRegistry[modelName] = providerName
                logger.info(f"Added model {modelName} to provider {providerName}, dood!")

            except Exception as e:
                logger.error(f"Failed to initialize model {modelName}: {e}")

    def listModels(self) -> List[str]:
        """List all available models across all providers, dood!"""
        return list(self.modelRegistry.keys())

    def getModel(self, name: str) -> Optional[AbstractModel]:
        """Get a model by name, dood!

        Args:
            name: Model name

        Returns:
            Model instance or None if not found
        """
        providerName = self.modelRegistry.get(name)
        if not providerName:
            return None

        provider = self.providers.get(providerName)
        if not provider:
            return None

        return provider.getModel(name)

    def getModelInfo(self, name: str) -> Optional[Dict[str, Any]]:
        """Get information about a specific model, dood!"""
        model = self.getModel(name)
        return model.getInfo() if model else None

    def getProvider(self, name: str) -> Optional[AbstractLLMProvider]:
        """Get a provider by name, dood!"""
        return self.providers.get(name)

    def listProviders(self) -> List[str]:
        """List all available providers, dood!"""
        return list(self.providers.keys())
