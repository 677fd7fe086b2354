"""Tests for cli.py module.

Tests the upload, inspect and config commands through Typer's CliRunner.
"""

import json

import pytest
from unittest.mock import patch
from typer.testing import CliRunner

from PIL import Image

from image_uploader.cli import app, describe_plan
from image_uploader.header import read_image_info
from image_uploader.models import CropOnly, CropRect, Identity, ResizeOnly, ResizeThenCrop


runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    """Config with a cropped thumbnail written under tmp_path/out."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "max_dimensions": 10_000_000,
        "image_versions": [
            {
                "upload_dir": str(tmp_path / "out"),
                "name_suffix": "_thumb",
                "max_width": 100,
                "max_height": 100,
                "crop": True,
            },
        ],
    }))
    return path


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "photo.png"
    Image.new('RGB', (800, 600), color=(1, 2, 3)).save(path, 'PNG')
    return path


class TestUploadCommand:
    """Tests for the upload command."""

    def test_writes_variants(self, tmp_path, config_path, image_path):
        """Should write the thumbnail using the file stem as main name."""
        result = runner.invoke(app, ["upload", str(image_path), "--config", str(config_path), "--mkdir"])

        assert result.exit_code == 0
        assert (tmp_path / "out" / "photo_thumb.png").exists()

    def test_custom_name(self, tmp_path, config_path, image_path):
        """--name should override the main name."""
        result = runner.invoke(app, [
            "upload", str(image_path), "--config", str(config_path), "--mkdir", "--name", "avatar_42",
        ])

        assert result.exit_code == 0
        assert (tmp_path / "out" / "avatar_42_thumb.png").exists()

    def test_name_requires_single_file(self, tmp_path, config_path, image_path):
        """--name with several files should exit with usage error."""
        other = tmp_path / "other.png"
        Image.new('RGB', (10, 10)).save(other, 'PNG')

        result = runner.invoke(app, [
            "upload", str(image_path), str(other), "--config", str(config_path), "--name", "x",
        ])

        assert result.exit_code == 2

    def test_repeat_upload_fails(self, config_path, image_path):
        """Second upload to the same name should exit non-zero."""
        runner.invoke(app, ["upload", str(image_path), "--config", str(config_path), "--mkdir"])

        result = runner.invoke(app, ["upload", str(image_path), "--config", str(config_path)])

        assert result.exit_code == 1
        assert "File already exist" in result.output

    def test_dry_run_writes_nothing(self, tmp_path, config_path, image_path):
        """--dry-run should print plans without creating files."""
        result = runner.invoke(app, ["upload", str(image_path), "--config", str(config_path), "--dry-run"])

        assert result.exit_code == 0
        assert not (tmp_path / "out").exists()

    def test_dry_run_reads_header_once(self, config_path, image_path):
        """--dry-run should plan from the header it already read."""
        with patch('image_uploader.cli.read_image_info', wraps=read_image_info) as mock_read:
            with patch('image_uploader.uploader.read_image_info') as mock_uploader_read:
                result = runner.invoke(app, ["upload", str(image_path), "--config", str(config_path), "--dry-run"])

        assert result.exit_code == 0
        assert mock_read.call_count == 1
        mock_uploader_read.assert_not_called()

    def test_mkdir_failure(self, config_path, image_path):
        """Unwritable upload directories should exit with code 1 and a message."""
        with patch('image_uploader.cli.prepare_upload_dirs', side_effect=PermissionError("denied")):
            result = runner.invoke(app, ["upload", str(image_path), "--config", str(config_path), "--mkdir"])

        assert result.exit_code == 1
        assert "Cannot create upload directories" in result.output
        assert not isinstance(result.exception, PermissionError)

    def test_bad_config(self, tmp_path, image_path):
        """Invalid config should exit with code 1."""
        bad = tmp_path / "bad.json"
        bad.write_text(json.dumps({"max_dimensions": 0, "image_versions": []}))

        result = runner.invoke(app, ["upload", str(image_path), "--config", str(bad)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output


class TestInspectCommand:
    """Tests for the inspect command."""

    def test_shows_format_and_size(self, image_path):
        """Should print the sniffed format and dimensions."""
        result = runner.invoke(app, ["inspect", str(image_path)])

        assert result.exit_code == 0
        assert "PNG" in result.output
        assert "800x600" in result.output

    def test_unsupported_file(self, tmp_path):
        """Should report unsupported files and exit non-zero."""
        path = tmp_path / "notes.txt"
        path.write_text("hello, this is text")

        result = runner.invoke(app, ["inspect", str(path)])

        assert result.exit_code == 1


class TestConfigCommand:
    """Tests for the config command."""

    def test_valid_config(self, config_path):
        """Should confirm a valid configuration."""
        result = runner.invoke(app, ["config", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "Configuration valid" in result.output


class TestDescribePlan:
    """Tests for describe_plan function."""

    def test_descriptions(self):
        """Should describe each plan kind."""
        rect = CropRect(0, 133, 400, 400)
        resize = ResizeOnly(size=(400, 666), width=400)

        assert describe_plan(Identity(size=(10, 10))) == "keep"
        assert describe_plan(resize) == "resize to 400x666"
        assert describe_plan(CropOnly(size=(400, 400), rect=rect)) == "crop 400x400 at (0, 133)"
        assert describe_plan(ResizeThenCrop(size=(400, 400), resize=resize, rect=rect)) == (
            "resize to 400x666, crop 400x400 at (0, 133)"
        )
