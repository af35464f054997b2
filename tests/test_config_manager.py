"""Tests for config_manager."""

import pytest

from config_manager import ConfigManager, ConfigurationError, MissingCredentialsError


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestCredentials:

    def test_missing_credentials_raise(self, clean_env, tmp_path):
        with pytest.raises(MissingCredentialsError):
            ConfigManager(ini_file_path=str(tmp_path / "none.ini"), env_file_path=str(tmp_path / ".env"))

    def test_missing_email_raises(self, clean_env, tmp_path):
        clean_env.setenv("PAGERDUTY_API_KEY", "token")
        with pytest.raises(MissingCredentialsError):
            ConfigManager(ini_file_path=str(tmp_path / "none.ini"), env_file_path=str(tmp_path / ".env"))

    def test_unusual_email_accepted(self, clean_env, tmp_path):
        clean_env.setenv("PAGERDUTY_API_KEY", "token")
        clean_env.setenv("PAGERDUTY_EMAIL", "oncall@corp.local")
        config = ConfigManager(ini_file_path=str(tmp_path / "none.ini"), env_file_path=str(tmp_path / ".env"))
        assert config.credentials.email == "oncall@corp.local"

    def test_loaded_from_env_file(self, clean_env, tmp_path):
        env_file = write(tmp_path / ".env", "PAGERDUTY_API_KEY=from-file\nPAGERDUTY_EMAIL=ops@example.com\n")
        config = ConfigManager(ini_file_path=str(tmp_path / "none.ini"), env_file_path=env_file)
        assert config.credentials.api_key == "from-file"
        assert config.credentials.email == "ops@example.com"

    def test_process_environment_wins_over_env_file(self, clean_env, tmp_path):
        clean_env.setenv("PAGERDUTY_API_KEY", "from-env")
        clean_env.setenv("PAGERDUTY_EMAIL", "ops@example.com")
        env_file = write(tmp_path / ".env", "PAGERDUTY_API_KEY=from-file\n")
        config = ConfigManager(ini_file_path=str(tmp_path / "none.ini"), env_file_path=env_file)
        assert config.credentials.api_key == "from-env"


class TestReportSettings:

    @pytest.fixture(autouse=True)
    def _credentials(self, clean_env):
        clean_env.setenv("PAGERDUTY_API_KEY", "token")
        clean_env.setenv("PAGERDUTY_EMAIL", "ops@example.com")

    def test_defaults_without_ini(self, tmp_path):
        config = ConfigManager(ini_file_path=str(tmp_path / "none.ini"), env_file_path=str(tmp_path / ".env"))
        assert config.report_settings.page_size == 100
        assert config.report_settings.aws_profile == "kashxa"
        assert config.report_settings.region_aliases == {}

    def test_ini_overrides(self, tmp_path):
        ini = write(tmp_path / "config.ini", (
            "[Report]\n"
            "PageSize = 50\n"
            "AwsProfile = production\n"
            "DefaultRegion = us-east-1\n"
            "\n"
            "[RegionAliases]\n"
            "EU (Frankfurt) = eu-central-1\n"
            "frankfurt = eu-central-1\n"
        ))
        config = ConfigManager(ini_file_path=ini, env_file_path=str(tmp_path / ".env"))
        settings = config.report_settings
        assert settings.page_size == 50
        assert settings.aws_profile == "production"
        assert settings.default_region == "us-east-1"
        assert settings.alarm_keyword == "unhealthyhostcount"
        assert settings.region_aliases == {"eu (frankfurt)": "eu-central-1", "frankfurt": "eu-central-1"}

    @pytest.mark.parametrize("text", [
        "PageSize = 100\n",
        "[RegionAliases]\nfrankfurt = eu-central-1\nFrankfurt = eu-central-1\n",
        "[Report]\n[Report]\n",
    ])
    def test_malformed_ini(self, tmp_path, text):
        ini = write(tmp_path / "config.ini", text)
        with pytest.raises(ConfigurationError):
            ConfigManager(ini_file_path=ini, env_file_path=str(tmp_path / ".env"))

    @pytest.mark.parametrize("page_size", ["lots", "0", "500"])
    def test_bad_page_size(self, tmp_path, page_size):
        ini = write(tmp_path / "config.ini", f"[Report]\nPageSize = {page_size}\n")
        with pytest.raises(ConfigurationError):
            ConfigManager(ini_file_path=ini, env_file_path=str(tmp_path / ".env"))
