"""Runtime settings read from the environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .core.client import API_URL, DEFAULT_MODEL
from .core.errors import ConfigError

PLACEHOLDER_KEY = "your-api-key-here"


@dataclass(frozen=True)
class Settings:
    fireworks_api_key: str
    google_search_api_key: str = ""
    google_search_cx: str = ""
    model: str = DEFAULT_MODEL
    api_url: str = API_URL
    enable_search: bool = True


def _read_from_zshrc(name: str) -> Optional[str]:
    """Fallback: look for ``export NAME=value`` in ~/.zshrc (convenience for macOS users)."""
    zshrc_path = Path.home() / ".zshrc"
    if not zshrc_path.exists():
        return None
    pattern = re.compile(rf"(?:export\s+)?{re.escape(name)}\s*=\s*['\"]?([^'\"\n]+)['\"]?")
    match = pattern.search(zshrc_path.read_text())
    return match.group(1).strip() if match else None


def _require(env: Mapping[str, str], name: str, use_shell_rc: bool) -> str:
    value = env.get(name) or (_read_from_zshrc(name) if use_shell_rc else None)
    if not value or value == PLACEHOLDER_KEY:
        raise ConfigError(f"{name} not set in environment or .env file")
    return value


def load_settings(env: Optional[Mapping[str, str]] = None, *, require_search: bool = True) -> Settings:
    """Build :class:`Settings` from *env* (``os.environ`` by default).

    Raises:
        ConfigError: if a required key is missing or still the placeholder.
    """
    use_shell_rc = env is None
    env = os.environ if env is None else env

    fireworks_key = _require(env, "FIREWORKS_API_KEY", use_shell_rc)
    google_key = _require(env, "GOOGLE_SEARCH_API_KEY", use_shell_rc) if require_search else ""

    return Settings(
        fireworks_api_key=fireworks_key,
        google_search_api_key=google_key,
        google_search_cx=env.get("GOOGLE_SEARCH_CX", ""),
        model=env.get("FIREWORKS_MODEL") or DEFAULT_MODEL,
        api_url=env.get("FIREWORKS_API_URL") or API_URL,
        enable_search=require_search,
    )
