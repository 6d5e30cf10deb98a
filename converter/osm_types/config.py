# Python 3.5
from __future__ import division

import os
from typing import Optional

from .classificator import DEFAULT_CLASSIFICATOR_PATH

CLASSIFICATOR_ENV_VAR = "OSM_TYPES_CLASSIFICATOR"
INSTRUMENTATION_ENV_VAR = "OSM_TYPES_INSTRUMENTATION"
PRETTY_JSON_ENV_VAR = "OSM_TYPES_PRETTY_JSON"


def parse_env_bool(name: str) -> Optional[bool]:
    raw = os.environ.get(name)
    if raw is None:
        return None
    normalized = raw.strip().lower()
    if normalized in ("1", "true", "yes", "on"):
        return True
    if normalized in ("0", "false", "no", "off"):
        return False
    return None


def classificator_path(override: Optional[str] = None) -> str:
    if override:
        return override
    from_env = os.environ.get(CLASSIFICATOR_ENV_VAR, "").strip()
    return from_env or DEFAULT_CLASSIFICATOR_PATH


def instrumentation_enabled(override: Optional[bool] = None) -> bool:
    if override is not None:
        return bool(override)
    return parse_env_bool(INSTRUMENTATION_ENV_VAR) is True


def pretty_json_enabled(override: Optional[bool] = None) -> bool:
    if override is not None:
        return bool(override)
    return parse_env_bool(PRETTY_JSON_ENV_VAR) is True
