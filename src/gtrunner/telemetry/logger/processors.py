# src/gtrunner/telemetry/logger/processors.py

"""
Custom structlog processors shared by every gtrunner renderer.
"""

import logging
from typing import Any

from structlog.typing import EventDict, WrappedLogger

LEVEL_EMOJIS = {
    "debug": "🐛",
    "info": "ℹ️",
    "warning": "⚠️",
    "error": "❌",
    "critical": "💥",
}

# Keys added by stdlib integration that only add noise to rendered output.
_EXTRA_KEYS = ("_record", "_from_structlog")


def add_emoji_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Prefixes the event message with an emoji for its level."""
    level = str(event_dict.get("level", method_name)).lower()
    emoji = event_dict.pop("emoji", None) or LEVEL_EMOJIS.get(level)
    event = event_dict.get("event")
    if emoji and isinstance(event, str):
        event_dict["event"] = f"{emoji} {event}"
    return event_dict


def remove_extra_keys_processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    for key in _EXTRA_KEYS:
        event_dict.pop(key, None)
    # Bound values of None carry no information in console output.
    for key in [k for k, v in event_dict.items() if v is None and k != "event"]:
        del event_dict[key]
    return event_dict


def level_name(level: int) -> str:
    name: Any = logging.getLevelName(level)
    return name if isinstance(name, str) else "INFO"


# 🔼⚙️
