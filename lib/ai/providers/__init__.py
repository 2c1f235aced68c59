"""
LLM Providers for Caelus, dood!
"""

from .basic_openai_provider import BasicOpenAIModel, BasicOpenAIProvider
from .huggingface_provider import HuggingFaceModel, HuggingFaceProvider
from .openai_provider import OpenAIProvider

__all__ = [
    "BasicOpenAIModel",
    "BasicOpenAIProvider",
    "HuggingFaceModel",
    "HuggingFaceProvider",
    "OpenAIProvider",
]
