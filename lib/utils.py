"""
Common utilities for Caelus.
"""

import dataclasses
import enum
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def jsonDumps(data: Any, compact: Optional[bool] = None, **kwargs) -> str:
    dumpKwargs = {
        "ensure_ascii": False,
        "default": str,
        "sort_keys": True,
    }

    if compact is None:
        # indent means pretty-printed output, no compact separators then
        compact = "indent" not in kwargs

    if compact:
        dumpKwargs["separators"] = (",", ":")
    dumpKwargs.update(kwargs)
    return json.dumps(toJsonable(data), **dumpKwargs)


def toJsonable(data: Any) -> Any:
    """Convert dataclasses (recursively), enums and tuples into JSON-friendly values"""
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {field.name: toJsonable(getattr(data, field.name)) for field in dataclasses.fields(data)}
    if isinstance(data, enum.Enum):
        return data.value
    if isinstance(data, dict):
        return {str(k): toJsonable(v) for k, v in data.items()}
    if isinstance(data, (list, tuple, set)):
        return [toJsonable(v) for v in data]
    return data


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.

    Reads KEY=VALUE lines, skipping blanks and # comments. A missing file is
    not an error: an empty dict is returned.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to put values into os.environ (default True),
            variables already set in the environment are not overridden

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    if not os.path.isfile(path):
        logger.debug(f"No dotenv file at {path}")
        return ret

    with open(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            ret[key.strip()] = value.strip().strip('"').strip("'")

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    logger.debug(f"Loaded {len(ret)} variables from {path}")
    return ret
