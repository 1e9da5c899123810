"""
Tests for settings loading.
"""
import pytest
from pydantic import ValidationError

from app.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_loads_from_environment(self):
        """Test settings load the test environment with defaults filled in."""
        settings = Settings(_env_file=None)

        assert settings.r2_bucket == "vaultix-test"
        assert settings.bcrypt_rounds == 4
        assert settings.jwt_expiration_days == 7
        assert settings.jwt_leeway_seconds == 0
        assert settings.upload_url_expiration == 60 * 60 * 24

    @pytest.mark.parametrize(
        "variable",
        ["JWT_SECRET", "DATABASE_URL", "R2_ENDPOINT", "R2_BUCKET", "R2_ACCESS_KEY", "R2_SECRET_KEY"],
    )
    def test_missing_required_value_fails(self, monkeypatch, variable: str):
        """Test startup fails when a required variable is absent."""
        monkeypatch.delenv(variable, raising=False)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_short_secret_fails(self, monkeypatch):
        """Test a signing secret under 32 characters is refused."""
        monkeypatch.setenv("JWT_SECRET", "too-short")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_bcrypt_rounds_bounded(self, monkeypatch):
        """Test bcrypt cost outside 4..31 is refused."""
        monkeypatch.setenv("BCRYPT_ROUNDS", "3")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_settings_are_immutable(self):
        """Test settings cannot be changed after construction."""
        settings = Settings(_env_file=None)

        with pytest.raises(ValidationError):
            settings.jwt_secret = "x" * 40
