"""
AI module for Caelus - LLM management system, dood!
"""

from .abstract import AbstractLLMProvider, AbstractModel
from .manager import LLMManager
from .models import ModelMessage, ModelResultStatus, ModelRunResult

__all__ = [
    # Abstract classes
    "AbstractModel",
    "AbstractLLMProvider",
    # Manager
    "LLMManager",
    # Models and enums
    "ModelMessage",
    "ModelResultStatus",
    "ModelRunResult",
]
