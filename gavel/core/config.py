"""
Runtime configuration for Gavel.

Values come from, in increasing priority:
1. LedgerConfig defaults
2. An optional JSON file
3. GAVEL_* environment variables (a .env file in the working directory
   is loaded first)
"""

import json
import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv


ENV_PREFIX = "GAVEL_"


@dataclass
class LedgerConfig:
    """Ledger and tooling configuration"""

    # Currency
    currency_decimals: int = 18  # Fractional digits of the display unit
    currency_symbol: str = "ETH"

    # Demo / scripts
    default_window_seconds: int = 60 * 60 * 24  # One day, as in the reference scenario

    # Logging
    log_level: str = "INFO"
    log_dir: Path = Path("logs")
    log_to_file: bool = False

    @property
    def log_level_value(self) -> int:
        """Numeric logging level for log_level."""
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        return level


def _coerce(name: str, raw, current):
    """Convert a raw file/env value to the type of the default."""
    if isinstance(current, bool):
        if isinstance(raw, bool):
            return raw
        return str(raw).strip().lower() in ("1", "true", "yes", "on")
    if isinstance(current, int):
        try:
            return int(raw)
        except (TypeError, ValueError):
            raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if isinstance(current, Path):
        return Path(raw)
    return str(raw)


def load_config(config_path: Optional[str] = None, use_env: bool = True) -> LedgerConfig:
    """
    Load configuration from file and environment.

    Args:
        config_path: Optional path to a JSON config file
        use_env: Whether to apply .env / GAVEL_* overrides

    Returns:
        LedgerConfig instance
    """
    config = LedgerConfig()
    known = {f.name for f in fields(LedgerConfig)}

    if config_path:
        data = json.loads(Path(config_path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a JSON object")
        for key, raw in data.items():
            if key not in known:
                raise ValueError(f"Unknown config key: {key}")
            setattr(config, key, _coerce(key, raw, getattr(config, key)))

    if use_env:
        dotenv_path = find_dotenv(usecwd=True)
        if dotenv_path:
            load_dotenv(dotenv_path)
        for name in known:
            raw = os.environ.get(ENV_PREFIX + name.upper())
            if raw is not None:
                setattr(config, name, _coerce(name, raw, getattr(config, name)))

    # Fail early on a bad level name
    config.log_level_value
    return config
