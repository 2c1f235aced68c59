"""
Message and result types shared by all LLM providers
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


@dataclass
class ModelMessage:
    """Single chat message, role is one of system/user/assistant"""

    role: str = "user"
    content: str = ""

    def toDict(self, contentKey: str = "content") -> Dict[str, Any]:
        return {"role": self.role, contentKey: self.content}

    def __str__(self) -> str:
        return json.dumps(self.toDict(), ensure_ascii=False)


class ModelResultStatus(Enum):
    """How the model run finished"""

    UNKNOWN = -1
    FINAL = 1
    #: hit max_tokens, the text is still good enough to show
    TRUNCATED_FINAL = 2
    CONTENT_FILTER = 3


@dataclass
class ModelRunResult:
    """Provider-independent outcome of generateText()"""

    rawResult: Any
    status: ModelResultStatus
    resultText: str = ""
    error: Optional[Exception] = None

    def isUsable(self) -> bool:
        """Final (or truncated-but-final) result with non-empty text"""
        if self.status not in (ModelResultStatus.FINAL, ModelResultStatus.TRUNCATED_FINAL):
            return False
        return bool(self.resultText.strip())

    def __str__(self) -> str:
        error = str(self.error) if self.error else None
        return f"ModelRunResult({self.status.name}, {self.resultText!r}, error={error})"
