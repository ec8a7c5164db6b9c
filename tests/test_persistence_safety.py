"""Tests for persistence safety features (backups, atomic writes, corruption handling)."""

import json
from pathlib import Path

import pytest
from pydantic import BaseModel

from haptiknit.exceptions import ConfigFileInvalidError, ConfigValidationError
from haptiknit.model_manager.persistence import PydanticPersistence
from haptiknit.models import AppConfig, DropPolicy


class SampleModel(BaseModel):
    """Simple model for testing."""

    name: str = "test"
    value: int = 42


class TestPersistenceSafety:
    """Test safety features of PydanticPersistence."""

    def test_save_creates_backup(self, tmp_path: Path):
        """Test that save_json creates a .bak file before overwriting."""
        config_path = tmp_path / "config.json"

        PydanticPersistence.save_json(SampleModel(name="original", value=1), config_path, backup=False)
        PydanticPersistence.save_json(SampleModel(name="modified", value=2), config_path, backup=True)

        backup_path = config_path.with_suffix(".json.bak")
        assert backup_path.exists()
        assert PydanticPersistence.load_json(backup_path, SampleModel).name == "original"
        assert PydanticPersistence.load_json(config_path, SampleModel).name == "modified"

    def test_save_without_backup(self, tmp_path: Path):
        config_path = tmp_path / "config.json"

        PydanticPersistence.save_json(SampleModel(), config_path, backup=False)
        PydanticPersistence.save_json(SampleModel(value=2), config_path, backup=False)

        assert not config_path.with_suffix(".json.bak").exists()

    def test_atomic_write_leaves_no_temp_file(self, tmp_path: Path):
        config_path = tmp_path / "nested" / "config.json"

        PydanticPersistence.save_json(SampleModel(), config_path)

        assert config_path.exists()
        assert not config_path.with_suffix(".json.tmp").exists()

    def test_empty_file_is_invalid(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text("   ")

        with pytest.raises(ConfigFileInvalidError):
            PydanticPersistence.load_json(config_path, SampleModel)

    def test_trailing_comma_reported(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text('{"name": "x",}')

        with pytest.raises(ConfigFileInvalidError) as exc_info:
            PydanticPersistence.load_json(config_path, SampleModel)
        assert exc_info.value.file_path == str(config_path)

    def test_invalid_value_reported_by_field(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"drop_policy": "shuffle"}))

        with pytest.raises(ConfigValidationError) as exc_info:
            AppConfig.load_or_default(config_path)

        assert exc_info.value.field == "drop_policy"
        assert "overwrite, evict, reject" in exc_info.value.recovery_hint

    def test_ensure_valid_creates_default(self, tmp_path: Path):
        config_path = tmp_path / "config.json"

        config = PydanticPersistence.ensure_valid_or_create(config_path, AppConfig)

        assert config == AppConfig()
        assert config_path.exists()

    def test_ensure_valid_does_not_overwrite_corrupt_file(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        config_path.write_text('{"grid_rows": ')

        config = PydanticPersistence.ensure_valid_or_create(config_path, AppConfig)

        assert config == AppConfig()
        assert config_path.read_text() == '{"grid_rows": '

    def test_load_or_default_preserves_values(self, tmp_path: Path):
        config_path = tmp_path / "config.json"
        AppConfig(drop_policy=DropPolicy.REJECT).save(config_path)

        assert AppConfig.load_or_default(config_path).drop_policy == DropPolicy.REJECT
