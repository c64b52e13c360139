"""Configuration management for Ubizy."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

UBIZY_HOME = Path(os.environ.get("UBIZY_HOME", Path.home() / "ubizy"))
CONFIG_FILE = UBIZY_HOME / "config" / "ubizy.conf"


@dataclass
class Config:
    """Ubizy configuration."""

    assistant_name: str = "Ubizy Assistant"
    # Pause before the assistant answers, in seconds
    thinking_delay: float = 1.0
    # External chat service (OpenAI-compatible chat completions)
    chat_api_url: str = "https://api.openai.com/v1/chat/completions"
    chat_api_key: str = ""
    chat_model: str = "gpt-4-turbo"
    chat_timeout: int = 30
    # Urgency tiers, in days from the start of today
    urgent_days: int = 1
    soon_days: int = 7
    # Due-ness of habits with an unrecognized frequency
    unknown_frequency_due: bool = True
    log_level: str = "INFO"


def _parse_bool(value: str) -> bool | None:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    return None


def _unquote(value: str) -> str:
    """Strip quotes, or an inline comment from an unquoted value."""
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from ubizy.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
        for line in path.read_text().splitlines():
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            if "=" not in line:
                continue

            key, _, value = line.partition("=")
            key = key.strip().lower()
            value = _unquote(value.strip())

            try:
                match key:
                    case "assistant_name":
                        config.assistant_name = value
                    case "thinking_delay":
                        config.thinking_delay = float(value)
                    case "chat_api_url":
                        config.chat_api_url = value
                    case "chat_api_key":
                        config.chat_api_key = value
                    case "chat_model":
                        config.chat_model = value
                    case "chat_timeout":
                        config.chat_timeout = int(value)
                    case "urgent_days":
                        config.urgent_days = int(value)
                    case "soon_days":
                        config.soon_days = int(value)
                    case "unknown_frequency_due":
                        parsed = _parse_bool(value)
                        if parsed is None:
                            raise ValueError(f"not a boolean: {value!r}")
                        config.unknown_frequency_due = parsed
                    case "log_level":
                        config.log_level = value.upper()
            except ValueError as e:
                logger.warning(f"Ignoring invalid {key.upper()} in {path}: {e}")

    if not config.chat_api_key:
        config.chat_api_key = os.environ.get("OPENAI_API_KEY", "")

    return config
