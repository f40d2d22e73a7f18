# Configuration for ESC/POS Decoder
# Defaults overridden by an optional config.json

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .errors import InvalidInputFormat, SourceUnavailable

logger = logging.getLogger(__name__)

CONFIG_FILE = Path(__file__).resolve().parent.parent / 'config.json'

DEFAULTS: Dict[str, Any] = {
    'encoding': 'gbk',
    'line_width': 48,
    'log_file': None,
    'log_level': 'INFO',
    'report_url': None,
    'api_key': None,
    'capture_idle_timeout': 2.0,
}


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """
    Load settings. An explicit path must exist; the default config.json is optional.
    """
    config = dict(DEFAULTS)
    config_path = Path(path) if path else CONFIG_FILE

    if not config_path.exists():
        if path:
            raise SourceUnavailable(f"Config file not found: {config_path}")
        return config

    try:
        with open(config_path, encoding='utf-8') as f:
            overrides = json.load(f)
    except OSError as e:
        raise SourceUnavailable(f"Cannot read config {config_path}: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidInputFormat(f"Invalid JSON in {config_path}: {e}") from e

    if not isinstance(overrides, dict):
        raise InvalidInputFormat(f"Config {config_path} must hold a JSON object")

    config.update(overrides)
    logger.debug("Loaded config from %s", config_path)
    return config
