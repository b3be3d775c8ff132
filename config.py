"""Helper for retrieving configuration settings from environment variables."""

import os
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent / '.env'
if ENV_PATH.exists():
    load_dotenv(str(ENV_PATH))


def get_config(name: str, default: Optional[str] = None) -> str:
    """Retrieve configuration from environment variables."""
    value = os.getenv(name, default)
    if value is None:
        raise RuntimeError(f"Missing configuration for {name}")
    return value


def get_int_config(name: str, default: Optional[int] = None) -> int:
    """Retrieve an integer setting, failing loudly on malformed values."""
    raw = get_config(name, None if default is None else str(default))
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Configuration {name} must be an integer, got {raw!r}") from None


def get_float_config(name: str, default: Optional[float] = None) -> float:
    raw = get_config(name, None if default is None else str(default))
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Configuration {name} must be a number, got {raw!r}") from None
