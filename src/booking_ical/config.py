"""Loading of site configuration and booking records from YAML files."""

from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from booking_ical.exceptions import ConfigError
from booking_ical.models.booking import BookingRecord, SiteConfig
from booking_ical.utils.logging import get_logger

logger = get_logger(__name__)


def _read_yaml(path: str) -> Dict[str, Any]:
    """Read a YAML mapping from a file.

    Args:
        path: Path to the YAML file.

    Returns:
        The parsed mapping.

    Raises:
        ConfigError: If the file is missing, unreadable or not a mapping.
    """
    file_path = Path(path)
    if not file_path.exists():
        logger.error("File {} not found", path)
        raise ConfigError(f"File {path} not found")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_config(config_path: str = "config.yaml") -> SiteConfig:
    """Load the site configuration.

    Args:
        config_path: Path to the configuration file. Defaults to "config.yaml".

    Returns:
        The validated SiteConfig.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    data = _read_yaml(config_path)
    try:
        config = SiteConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid site configuration in {config_path}: {e}") from e

    logger.debug("Loaded site configuration for {}", config.wwwroot)
    return config


def load_booking_file(path: str) -> BookingRecord:
    """Load the booking, option, session dates and users to export.

    Args:
        path: Path to the booking YAML file.

    Returns:
        The validated BookingRecord.

    Raises:
        ConfigError: If the file is missing or invalid.
    """
    data = _read_yaml(path)
    try:
        return BookingRecord(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid booking file {path}: {e}") from e
