from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import yaml
from dotenv import load_dotenv
from loguru import logger

load_dotenv()

CONFIG_ENV_VAR = "FLASHDECK_CONFIG"
DEFAULT_CONFIG_PATH = "flashdeck.yaml"


def load_config(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    config_path = Path(path)
    if not config_path.exists():
        return {}
    with config_path.open('r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring config file {config_path}: top level is not a mapping")
        return {}
    return data


def get_config_value(config: Dict[str, Any], keys: Iterable[str], default: Any = None) -> Any:
    cur: Any = config
    for key in keys:
        if not isinstance(cur, dict) or key not in cur:
            return default
        cur = cur[key]
    return cur


def resolve_value(arg_value: Any, config: Dict[str, Any], keys: Iterable[str], default: Any) -> Any:
    if arg_value is not None:
        return arg_value
    cfg_value = get_config_value(config, keys, default=None)
    return default if cfg_value is None else cfg_value


@lru_cache(maxsize=1)
def get_app_config() -> Dict[str, Any]:
    """YAML config named by FLASHDECK_CONFIG (or ./flashdeck.yaml), empty if absent"""
    path = os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)
    config = load_config(path)
    if config:
        logger.info(f"Loaded configuration from {path}")
    return config


def get_setting(keys: Iterable[str], env_var: Optional[str] = None, default: Any = None) -> Any:
    """Environment variable first, then the YAML config, then the default"""
    env_value = os.getenv(env_var) if env_var else None
    return resolve_value(env_value, get_app_config(), keys, default)
