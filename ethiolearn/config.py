"""
config.py
=========

Central place for every setting the app reads.
Streamlit pages, the Gemini gateway and the logger all obtain their
settings through this class.

Sources, lowest priority first:
- built-in defaults
- config.toml at the project root (optional)
- environment variables (GEMINI_API_KEY / API_KEY / ETHIOLEARN_MODEL)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional

import toml

from .logger import get_logger

logger = get_logger(__name__)


# ------------------------------------------------------------
# Paths
# ------------------------------------------------------------

ROOT_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = ROOT_DIR / "config.toml"
ENV_PATH = ROOT_DIR / ".env"

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_TIMEOUT = 30.0
DEFAULT_EXAM_DATE = date(2027, 6, 28)
SUPPORTED_LANGUAGES = ("en", "am")


# ------------------------------------------------------------
# AppConfig
# ------------------------------------------------------------

@dataclass
class AppConfig:
    """
    Application settings.

    - API key lookup
    - Gemini model name and per-request timeout
    - national exam date used by the dashboard countdown
    """

    # ---------- API ----------
    gemini_api_key: str = ""
    model_name: str = DEFAULT_MODEL
    request_timeout: float = DEFAULT_TIMEOUT

    # ---------- App ----------
    exam_date: date = DEFAULT_EXAM_DATE
    default_language: str = "en"
    log_level: str = "INFO"

    @property
    def is_online(self) -> bool:
        return bool(self.gemini_api_key)

    # ============================================================
    # Loading
    # ============================================================

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        env: Optional[Dict[str, str]] = None,
        env_path: Optional[Path] = None,
    ) -> "AppConfig":
        """
        Build the config from config.toml and the environment.
        Bad values are logged and replaced by their defaults.
        """
        env = os.environ if env is None else env
        data = read_toml(config_path or CONFIG_PATH)

        gemini = _section(data, "gemini")
        app = _section(data, "app")
        logging_cfg = _section(data, "logging")

        cfg = cls()
        cfg.gemini_api_key = _load_api_key(env, env_path or ENV_PATH)

        model = env.get("ETHIOLEARN_MODEL") or gemini.get("model")
        if isinstance(model, str) and model.strip():
            cfg.model_name = model.strip()

        if "request_timeout" in gemini:
            try:
                timeout = float(gemini["request_timeout"])
                if timeout <= 0:
                    raise ValueError(timeout)
                cfg.request_timeout = timeout
            except (TypeError, ValueError):
                logger.warning(
                    f"Invalid request_timeout {gemini['request_timeout']!r}, "
                    f"using {DEFAULT_TIMEOUT}"
                )

        if "exam_date" in app:
            raw = app["exam_date"]
            if isinstance(raw, date):
                cfg.exam_date = raw
            else:
                try:
                    cfg.exam_date = date.fromisoformat(str(raw))
                except ValueError:
                    logger.warning(f"Invalid exam_date {raw!r}, using default")

        language = app.get("language")
        if language is not None:
            if language in SUPPORTED_LANGUAGES:
                cfg.default_language = language
            else:
                logger.warning(f"Unsupported language {language!r}, using 'en'")

        level = logging_cfg.get("level")
        if isinstance(level, str) and level:
            cfg.log_level = level.upper()

        return cfg


# ============================================================
# Helpers
# ============================================================

def _load_api_key(env: Dict[str, str], env_path: Path) -> str:
    """
    Resolve the Gemini key from GEMINI_API_KEY, API_KEY, then a .env file.
    Empty string means offline mode.
    """
    for name in ("GEMINI_API_KEY", "API_KEY"):
        key = env.get(name)
        if key:
            return key

    if env_path.exists():
        for line in env_path.read_text(encoding="utf-8").splitlines():
            if line.startswith("GEMINI_API_KEY="):
                return line.split("=", 1)[1].strip()

    return ""


def read_toml(path: Path) -> Dict[str, Any]:
    """Parse a TOML file; a missing or broken file yields {}."""
    if not path.exists():
        return {}
    try:
        return toml.load(path)
    except (toml.TomlDecodeError, OSError) as e:
        logger.warning(f"Could not read {path}: {e}")
        return {}


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    value = data.get(name)
    return value if isinstance(value, dict) else {}
