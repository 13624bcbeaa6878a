"""Read fallback settings from the repository's .env.defaults file.

Environment variables always win; this file only fills in values that are not
exported in the shell. It lives at the repository root so the same defaults
apply to pytest runs, the screenshot CLI and ad-hoc debugging sessions.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

REPO_ROOT = Path(__file__).resolve().parents[1]
ENV_DEFAULTS_FILE = REPO_ROOT / ".env.defaults"

_TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_env_file(path: Path) -> Dict[str, str]:
    """Parse KEY=VALUE lines, ignoring comments, blanks and malformed lines."""
    values: Dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        value = value.strip()
        if len(value) >= 2 and value[0] in ('"', "'") and value[-1] == value[0]:
            value = value[1:-1]
        values[key.strip()] = value
    return values


@lru_cache(maxsize=1)
def _load_env_defaults() -> Dict[str, str]:
    if not ENV_DEFAULTS_FILE.exists():
        return {}
    return parse_env_file(ENV_DEFAULTS_FILE)


def get_env_default(key: str) -> Optional[str]:
    return _load_env_defaults().get(key)


def env_str(key: str, default: str) -> str:
    value = os.getenv(key)
    if value is None or value == "":
        value = get_env_default(key)
    return value if value not in (None, "") else default


def env_int(key: str, default: int) -> int:
    raw = env_str(key, str(default))
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from exc


def env_bool(key: str, default: bool) -> bool:
    raw = env_str(key, "true" if default else "false")
    return raw.strip().lower() in _TRUE_VALUES
