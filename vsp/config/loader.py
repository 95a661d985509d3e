import logging
from pathlib import Path
from typing import Optional
import yaml
from vsp.config.models import AppConfig

DEFAULT_CONFIG_PATH = Path("conf/vsp.yaml")

logger = logging.getLogger(__name__)

def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Loads YAML config into AppConfig. Missing or empty files give defaults."""
    config_file = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not config_file.exists():
        logger.warning(f"Config file not found at {config_file}, using defaults.")
        return AppConfig()

    with open(config_file, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_file} must contain a mapping, got {type(data).__name__}")

    return AppConfig(**data)
