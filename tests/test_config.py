"""Tests for config.py module.

Tests config file discovery, validation and conversion to UploaderConfig.
"""

import json

import pytest
from pathlib import Path

from image_uploader import config as config_module
from image_uploader.config import (
    ConfigError,
    get_uploader_config,
    load_config,
    prepare_upload_dirs,
    validate_config,
)
from image_uploader.models import UploaderConfig, VariantSpec


@pytest.fixture
def raw_config():
    """Minimal valid configuration dictionary."""
    return {
        "max_dimensions": 50_000_000,
        "image_versions": [
            {
                "upload_dir": "uploads/thumbs",
                "name_suffix": "_thumb",
                "max_width": 200,
                "max_height": 200,
                "quality": 80,
                "crop": True,
            },
            {
                "upload_dir": "uploads/full",
                "max_width": 2048,
                "max_height": 2048,
            },
        ],
    }


class TestLoadConfig:
    """Tests for load_config function."""

    def test_explicit_path(self, tmp_path, raw_config):
        """Should load JSON from an explicit path."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps(raw_config))

        assert load_config(path) == raw_config

    def test_explicit_path_missing(self, tmp_path):
        """Should raise ConfigError when the explicit file is missing."""
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.json")

    def test_invalid_json(self, tmp_path):
        """Should raise ConfigError for malformed JSON."""
        path = tmp_path / "config.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_config(path)

    def test_non_object_json(self, tmp_path):
        """Should raise ConfigError when the top level is not an object."""
        path = tmp_path / "config.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError):
            load_config(path)

    def test_searches_user_config_dir(self, tmp_path, monkeypatch, raw_config):
        """Should prefer ~/.config/image-uploader/config.json."""
        user_dir = tmp_path / "user"
        user_dir.mkdir()
        (user_dir / "config.json").write_text(json.dumps(raw_config))
        monkeypatch.setattr(config_module, "get_config_dir", lambda: user_dir)
        monkeypatch.chdir(tmp_path)

        assert load_config() == raw_config

    def test_falls_back_to_local_file(self, tmp_path, monkeypatch, raw_config):
        """Should use ./image-uploader.json when no user config exists."""
        monkeypatch.setattr(config_module, "get_config_dir", lambda: tmp_path / "missing")
        monkeypatch.chdir(tmp_path)
        Path("image-uploader.json").write_text(json.dumps(raw_config))

        assert load_config() == raw_config

    def test_no_config_anywhere(self, tmp_path, monkeypatch):
        """Should raise ConfigError when nothing is found."""
        monkeypatch.setattr(config_module, "get_config_dir", lambda: tmp_path / "missing")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(ConfigError):
            load_config()


class TestValidateConfig:
    """Tests for validate_config function."""

    def test_accepts_valid_config(self, raw_config):
        """Should not raise for a valid config."""
        validate_config(raw_config)

    def test_missing_max_dimensions(self, raw_config):
        """Should require max_dimensions."""
        del raw_config["max_dimensions"]

        with pytest.raises(ConfigError, match="max_dimensions"):
            validate_config(raw_config)

    def test_rejects_bool_as_int(self, raw_config):
        """true is not a pixel budget."""
        raw_config["max_dimensions"] = True

        with pytest.raises(ConfigError, match="max_dimensions"):
            validate_config(raw_config)

    def test_empty_versions(self, raw_config):
        """Should require at least one image version."""
        raw_config["image_versions"] = []

        with pytest.raises(ConfigError, match="image_versions"):
            validate_config(raw_config)

    def test_missing_upload_dir(self, raw_config):
        """Should name the version missing its upload_dir."""
        del raw_config["image_versions"][1]["upload_dir"]

        with pytest.raises(ConfigError, match=r"image_versions\[1\]\.upload_dir"):
            validate_config(raw_config)

    def test_zero_width(self, raw_config):
        """Box dimensions must be positive."""
        raw_config["image_versions"][0]["max_width"] = 0

        with pytest.raises(ConfigError, match="max_width"):
            validate_config(raw_config)

    @pytest.mark.parametrize("quality", [-1, 101, "high"])
    def test_quality_range(self, raw_config, quality):
        """Quality must be an integer between 0 and 100."""
        raw_config["image_versions"][0]["quality"] = quality

        with pytest.raises(ConfigError, match="quality"):
            validate_config(raw_config)

    def test_crop_must_be_bool(self, raw_config):
        """Flags must be JSON booleans."""
        raw_config["image_versions"][0]["crop"] = "yes"

        with pytest.raises(ConfigError, match="crop"):
            validate_config(raw_config)


class TestGetUploaderConfig:
    """Tests for get_uploader_config function."""

    def test_builds_specs_in_order(self, raw_config):
        """Should keep version order and apply defaults."""
        config = get_uploader_config(raw_config)

        assert config == UploaderConfig(
            max_dimensions=50_000_000,
            image_versions=(
                VariantSpec(Path("uploads/thumbs"), "_thumb", 200, 200, quality=80, crop=True),
                VariantSpec(Path("uploads/full"), "", 2048, 2048, quality=75, rotate_by_exif=False, crop=False),
            ),
        )


class TestPrepareUploadDirs:
    """Tests for prepare_upload_dirs function."""

    def test_creates_directories(self, tmp_path):
        """Should create nested upload directories."""
        config = UploaderConfig(
            max_dimensions=100,
            image_versions=(
                VariantSpec(tmp_path / "a" / "b", "_x", 10, 10),
                VariantSpec(tmp_path / "c", "_y", 10, 10),
            ),
        )

        dirs = prepare_upload_dirs(config)

        assert dirs == [tmp_path / "a" / "b", tmp_path / "c"]
        assert all(d.is_dir() for d in dirs)
