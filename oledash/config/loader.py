"""
JSON configuration loader.
"""

import json
import logging
from pathlib import Path
from typing import Union

from .model import DashboardConfig
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)


def load_config(path: Union[str, Path]) -> DashboardConfig:
    """
    Load a dashboard configuration from a JSON file.

    Args:
        path: Path to the JSON document

    Returns:
        Parsed DashboardConfig

    Raises:
        ConfigurationError: if the file is missing, malformed or invalid
    """
    path = Path(path)
    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"configuration file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"malformed configuration {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigurationError(f"configuration root must be an object: {path}")

    cfg = DashboardConfig.from_dict(data)
    logger.info(f"Loaded configuration from {path}: {len(cfg.widgets)} widgets, "
                f"{cfg.display.width}x{cfg.display.height}")
    return cfg
