"""Configuration management for Image Uploader.

Handles loading the JSON config file, validating the pixel budget and
variant definitions, and building the immutable UploaderConfig.
"""

import json
from pathlib import Path
from typing import Any

from .models import UploaderConfig, VariantSpec

CONFIG_FILENAME = "config.json"
LOCAL_CONFIG_FILENAME = "image-uploader.json"


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""
    pass


def get_config_dir() -> Path:
    """Get the config directory.

    Returns:
        Path to config directory (~/.config/image-uploader/)
    """
    return Path.home() / ".config" / "image-uploader"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load the raw configuration dictionary.

    Searches for the config file in the following order:
    1. Explicit path if provided
    2. ~/.config/image-uploader/config.json
    3. ./image-uploader.json (current directory)

    Args:
        config_path: Optional explicit path to the config file

    Returns:
        Dictionary loaded from the JSON file

    Raises:
        ConfigError: If the file is missing or not valid JSON
    """
    if config_path is not None:
        if not config_path.exists():
            raise ConfigError(f"Config file not found at {config_path}")
        found_path = config_path
    else:
        user_path = get_config_dir() / CONFIG_FILENAME
        local_path = Path(LOCAL_CONFIG_FILENAME)

        if user_path.exists():
            found_path = user_path
        elif local_path.exists():
            found_path = local_path
        else:
            raise ConfigError(
                f"No config found at {user_path} or ./{LOCAL_CONFIG_FILENAME}. "
                "Pass --config to point at one."
            )

    try:
        with open(found_path) as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {found_path}: {e}")

    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a JSON object in {found_path}")
    return raw


def _require_int(value: Any, name: str, minimum: int, maximum: int | None = None) -> None:
    # bool is an int subclass but never a valid size
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer")
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}")
    if maximum is not None and value > maximum:
        raise ConfigError(f"{name} must be <= {maximum}")


def validate_config(raw: dict[str, Any]) -> None:
    """Validate that all required configuration fields are present and sane.

    Args:
        raw: Dictionary loaded from the config file

    Raises:
        ConfigError: Naming the first offending field
    """
    if "max_dimensions" not in raw:
        raise ConfigError("Missing required field: max_dimensions")
    _require_int(raw["max_dimensions"], "max_dimensions", 1)

    versions = raw.get("image_versions")
    if not isinstance(versions, list) or not versions:
        raise ConfigError("image_versions must be a non-empty list")

    for i, version in enumerate(versions):
        prefix = f"image_versions[{i}]"
        if not isinstance(version, dict):
            raise ConfigError(f"{prefix} must be an object")
        for field in ("upload_dir", "max_width", "max_height"):
            if field not in version:
                raise ConfigError(f"Missing required field: {prefix}.{field}")
        if not isinstance(version["upload_dir"], str) or not version["upload_dir"]:
            raise ConfigError(f"{prefix}.upload_dir must be a non-empty string")
        if not isinstance(version.get("name_suffix", ""), str):
            raise ConfigError(f"{prefix}.name_suffix must be a string")
        _require_int(version["max_width"], f"{prefix}.max_width", 1)
        _require_int(version["max_height"], f"{prefix}.max_height", 1)
        _require_int(version.get("quality", 75), f"{prefix}.quality", 0, 100)
        for flag in ("rotate_by_exif", "crop"):
            if not isinstance(version.get(flag, False), bool):
                raise ConfigError(f"{prefix}.{flag} must be true or false")


def get_uploader_config(raw: dict[str, Any]) -> UploaderConfig:
    """Build UploaderConfig from a validated configuration dictionary.

    Args:
        raw: Dictionary that passed validate_config

    Returns:
        Immutable UploaderConfig
    """
    versions = tuple(
        VariantSpec(
            upload_dir=Path(version["upload_dir"]).expanduser(),
            name_suffix=version.get("name_suffix", ""),
            max_width=version["max_width"],
            max_height=version["max_height"],
            quality=version.get("quality", 75),
            rotate_by_exif=version.get("rotate_by_exif", False),
            crop=version.get("crop", False),
        )
        for version in raw["image_versions"]
    )
    return UploaderConfig(max_dimensions=raw["max_dimensions"], image_versions=versions)


def prepare_upload_dirs(config: UploaderConfig) -> list[Path]:
    """Create every variant's upload directory.

    Returns:
        The directories, in variant order
    """
    dirs = []
    for spec in config.image_versions:
        spec.upload_dir.mkdir(parents=True, exist_ok=True)
        dirs.append(spec.upload_dir)
    return dirs
