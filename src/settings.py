"""Runtime configuration.

Values are resolved with priority: real environment variable > project
.env file > default. The .env file is optional; malformed lines in it
are ignored.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / '.env'

DEFAULT_DATA_DIR = PROJECT_ROOT / 'data'
DEFAULT_STORAGE_KEY = 'orders'
DEFAULT_LOG_LEVEL = 'WARNING'

KNOWN_KEYS = {
    'ORDERS_DATA_DIR', 'ORDERS_STORAGE_KEY', 'ORDERS_ALT_SCREEN',
    'ORDERS_LOG_LEVEL', 'ORDERS_LOG_FILE',
    'ORDERS_PRIMARY', 'ORDERS_PENDING', 'ORDERS_DONE',
}


def read_env_file(path: Path = ENV_FILE) -> Dict[str, str]:
    """Parse KEY=VALUE lines for the keys this project knows about."""
    overrides: Dict[str, str] = {}
    if not path.exists():
        return overrides
    for line in path.read_text(encoding='utf-8').splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        v = v.strip().strip('"').strip("'")
        if k in KNOWN_KEYS:
            overrides[k] = v
    return overrides


def truthy(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    storage_key: str = DEFAULT_STORAGE_KEY
    alt_screen: bool = True
    log_level: int = logging.WARNING
    log_file: Optional[str] = None
    primary_color: Optional[str] = None
    pending_color: Optional[str] = None
    done_color: Optional[str] = None


def _log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def lookup(key: str, environ: Mapping[str, str], file_values: Mapping[str, str]) -> Optional[str]:
    return environ.get(key) or file_values.get(key)


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  env_file: Path = ENV_FILE) -> Settings:
    env = os.environ if environ is None else environ
    file_values = read_env_file(env_file)
    data_dir = lookup('ORDERS_DATA_DIR', env, file_values)
    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        storage_key=lookup('ORDERS_STORAGE_KEY', env, file_values) or DEFAULT_STORAGE_KEY,
        alt_screen=truthy(lookup('ORDERS_ALT_SCREEN', env, file_values), True),
        log_level=_log_level(lookup('ORDERS_LOG_LEVEL', env, file_values) or DEFAULT_LOG_LEVEL),
        log_file=lookup('ORDERS_LOG_FILE', env, file_values) or None,
        primary_color=lookup('ORDERS_PRIMARY', env, file_values),
        pending_color=lookup('ORDERS_PENDING', env, file_values),
        done_color=lookup('ORDERS_DONE', env, file_values),
    )
