"""
Configuration loading for the forecast API.

Static settings live in config/api.yaml; secrets and deployment-specific
values come from the environment (a .env file is honoured).
"""
import os
from functools import lru_cache
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

load_dotenv()

DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(__file__), "../config/api.yaml")


def load_yaml(file_path: str) -> Dict[str, Any]:
    """
    Load YAML configuration file

    Args:
        file_path: Path to YAML file

    Returns:
        Dictionary with configuration
    """
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


@lru_cache()
def load_api_config() -> Dict[str, Any]:
    """
    Load the application configuration once and cache it.

    The file path can be overridden with FORECAST_API_CONFIG.

    Returns:
        dict: Full configuration with the access guard credentials merged in
    """
    config_path = os.getenv("FORECAST_API_CONFIG", DEFAULT_CONFIG_PATH)
    config = load_yaml(config_path)

    config["auth"] = {
        "username": os.getenv("STATS_USERNAME", "forecast"),
        "password": os.getenv("STATS_PASSWORD", "forecast"),
    }
    return config
