"""
Tests for configuration loading.
"""

import pytest

from stylebook.config import AppConfig, DefaultsConfig


def _write(tmp_path, content: str):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    return path


class TestAppConfig:
    """Tests for AppConfig."""

    def test_defaults(self):
        config = AppConfig()

        assert config.timezone is None
        assert config.defaults.service_duration_minutes == 60
        assert config.defaults.days_forward == 14
        assert config.store.base_url == ""
        assert config.providers == []

    def test_load_from_yaml(self, tmp_path):
        path = _write(
            tmp_path,
            "timezone: America/New_York\n"
            "defaults:\n"
            "  service_duration_minutes: 90\n"
            "store:\n"
            "  base_url: https://documents.example.com/v1\n"
            "providers:\n"
            "  - name: amara\n"
            "    provider_id: amara-okafor\n"
        )

        config = AppConfig.load_from_yaml(path)

        assert config.timezone == "America/New_York"
        assert config.defaults.service_duration_minutes == 90
        assert config.defaults.days_forward == 14
        assert config.store.base_url == "https://documents.example.com/v1"
        assert config.resolve_provider("Amara") == "amara-okafor"

    def test_unknown_alias_is_taken_as_provider_id(self):
        assert AppConfig().resolve_provider("jordan-lee") == "jordan-lee"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AppConfig.load_from_yaml(tmp_path / "missing.yaml")

    def test_empty_file_gives_defaults(self, tmp_path):
        config = AppConfig.load_from_yaml(_write(tmp_path, ""))

        assert config.defaults.days_forward == 14

    def test_non_mapping_root_raises(self, tmp_path):
        with pytest.raises(ValueError, match="mapping at the root"):
            AppConfig.load_from_yaml(_write(tmp_path, "- just\n- a list\n"))

    def test_invalid_yaml_raises(self, tmp_path):
        with pytest.raises(ValueError, match="Invalid YAML"):
            AppConfig.load_from_yaml(_write(tmp_path, "timezone: [unclosed\n"))

    def test_unknown_timezone_rejected(self):
        with pytest.raises(ValueError, match="Unknown timezone"):
            AppConfig(timezone="Mars/Olympus_Mons")

    def test_duplicate_provider_alias_rejected(self):
        with pytest.raises(ValueError, match="Duplicate provider name"):
            AppConfig(providers=[
                {"name": "amara", "provider_id": "a"},
                {"name": "Amara", "provider_id": "b"},
            ])


class TestDefaultsConfig:
    """Tests for DefaultsConfig validation."""

    @pytest.mark.parametrize("field", ["service_duration_minutes", "days_forward"])
    def test_non_positive_rejected(self, field):
        with pytest.raises(ValueError, match="greater than zero"):
            DefaultsConfig(**{field: 0})
