from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

ENV_PREFIX = "CRM_DOCUMENTS_"
BACKENDS = ("stream", "canvas")


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_text(env: Mapping[str, str], name: str, default: str = "") -> str:
    return str(env.get(ENV_PREFIX + name) or default).strip()


@dataclass(frozen=True)
class Settings:
    backend: str = "stream"
    currency: str = "DKK"
    default_tax_pct: float = 25.0
    default_discount_pct: float = 0.0
    font_regular_url: str = ""
    font_bold_url: str = ""
    fetch_timeout: float = 10.0
    content_path: Path | None = None

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Settings":
        """Read CRM_DOCUMENTS_* variables; malformed values keep the defaults."""
        env = os.environ if env is None else env
        backend = _env_text(env, "BACKEND", "stream").lower()
        if backend not in BACKENDS:
            backend = "stream"
        content_path = _env_text(env, "CONTENT_PATH")
        return cls(
            backend=backend,
            currency=_env_text(env, "CURRENCY", "DKK").upper(),
            default_tax_pct=_env_float(env, "TAX_PCT", 25.0),
            default_discount_pct=_env_float(env, "DISCOUNT_PCT", 0.0),
            font_regular_url=_env_text(env, "FONT_REGULAR_URL"),
            font_bold_url=_env_text(env, "FONT_BOLD_URL"),
            fetch_timeout=_env_float(env, "FETCH_TIMEOUT", 10.0),
            content_path=Path(content_path) if content_path else None,
        )

    @property
    def custom_fonts(self) -> bool:
        return bool(self.font_regular_url and self.font_bold_url)
