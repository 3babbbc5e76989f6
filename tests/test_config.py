"""
==============================================================================
Configuration and Database Tests
==============================================================================
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from scanflow.config import Settings
from scanflow.db import DatabaseInitializer, DatabaseManager
from scanflow.domain.models import BarcodeMode
from scanflow.utils.validators import UploadValidator


class TestSettings:
    """Tests for Settings parsing."""

    def test_default_mode_is_case_insensitive(self):
        assert Settings(default_mode="unique").default_mode is BarcodeMode.UNIQUE
        assert Settings(default_mode=" STANDARD ").default_mode is BarcodeMode.STANDARD

    def test_unknown_default_mode(self):
        with pytest.raises(ValidationError):
            Settings(default_mode="fancy")

    def test_submission_timeout_bounds(self):
        assert Settings(submission_timeout_seconds=5).submission_timeout_seconds == 5
        with pytest.raises(ValidationError):
            Settings(submission_timeout_seconds=0)

    def test_json_lists(self):
        settings = Settings(cors_origins='["http://a", "http://b"]', allowed_content_types="not json")
        assert settings.cors_origins_list == ["http://a", "http://b"]
        assert "image/png" in settings.allowed_content_types_list

    def test_unknown_environment_falls_back(self):
        assert Settings(app_env="Moon").app_env == "development"

    @pytest.mark.parametrize("url,expected", [
        ("sqlite:///./storage/db/scanflow.db", Path("storage/db/scanflow.db")),
        ("sqlite:///:memory:", None),
        ("sqlite://", None),
        ("postgresql://user:pw@db/scanflow", None),
    ])
    def test_sqlite_file(self, url, expected):
        assert Settings(database_url=url).sqlite_file() == expected


class TestUploadValidator:
    """Tests for UploadValidator."""

    def test_content_types(self):
        validator = UploadValidator(["image/jpeg"])
        assert validator.normalize_content_type(None) == "image/jpeg"
        assert validator.normalize_content_type("Image/PNG; q=1") == "image/png"
        assert validator.validate_content_type("image/webp") == (True, None)
        assert validator.validate_content_type("text/plain")[0] is False

    def test_size(self):
        validator = UploadValidator(max_bytes=10)
        assert validator.validate_size(10) == (True, None)
        assert validator.validate_size(11)[0] is False


class TestDatabase:
    """Tests for DatabaseManager and DatabaseInitializer."""

    def test_in_memory_store_is_shared_across_sessions(self):
        manager = DatabaseManager("sqlite:///:memory:")
        DatabaseInitializer(manager).initialize()

        assert manager.verify_connection() is True
        assert DatabaseInitializer(manager).verify_tables() is True
        manager.dispose()

    def test_repr(self):
        assert "memory" in repr(DatabaseManager("sqlite:///:memory:"))
