"""Unit tests for settings loading."""

import pytest

from pushrelay.core.config import Settings, get_settings
from pushrelay.core.exceptions import ConfigurationError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ("VAPID_PUBLIC_KEY", "VAPID_PRIVATE_KEY", "VAPID_CLAIMS_EMAIL", "PORT"):
        monkeypatch.delenv(name, raising=False)
    # keep any developer .env out of the way
    monkeypatch.chdir(tmp_path)
    return monkeypatch


class TestGetSettings:
    def test_missing_keys_raise_configuration_error(self, clean_env) -> None:
        with pytest.raises(ConfigurationError):
            get_settings()

    def test_blank_key_raises_configuration_error(self, clean_env) -> None:
        clean_env.setenv("VAPID_PUBLIC_KEY", "public")
        clean_env.setenv("VAPID_PRIVATE_KEY", "   ")
        with pytest.raises(ConfigurationError):
            get_settings()

    def test_defaults(self, clean_env) -> None:
        clean_env.setenv("VAPID_PUBLIC_KEY", "public")
        clean_env.setenv("VAPID_PRIVATE_KEY", "private")

        settings = get_settings()

        assert settings.PORT == 8080
        assert settings.PUSH_TTL == 30
        assert settings.SUBSCRIPTIONS_FILE == "data/subscriptions.json"
        assert settings.VAPID_CLAIMS_EMAIL == "mailto:admin@example.com"

    def test_reads_dotenv(self, clean_env, tmp_path) -> None:
        (tmp_path / ".env").write_text("VAPID_PUBLIC_KEY=pub\nVAPID_PRIVATE_KEY=priv\nPORT=9090\n", encoding="utf-8")

        settings = get_settings()

        assert settings.VAPID_PUBLIC_KEY == "pub"
        assert settings.PORT == 9090


class TestClaimsEmail:
    def test_mailto_prefix_added(self) -> None:
        settings = Settings(
            _env_file=None,
            VAPID_PUBLIC_KEY="pub",
            VAPID_PRIVATE_KEY="priv",
            VAPID_CLAIMS_EMAIL="ops@example.com",
        )
        assert settings.VAPID_CLAIMS_EMAIL == "mailto:ops@example.com"

    def test_https_subject_kept(self) -> None:
        settings = Settings(
            _env_file=None,
            VAPID_PUBLIC_KEY="pub",
            VAPID_PRIVATE_KEY="priv",
            VAPID_CLAIMS_EMAIL="https://example.com/contact",
        )
        assert settings.VAPID_CLAIMS_EMAIL == "https://example.com/contact"


class TestConfigurationErrorMessage:
    def test_names_only_the_invalid_field(self, clean_env) -> None:
        clean_env.setenv("VAPID_PUBLIC_KEY", "public")
        clean_env.setenv("VAPID_PRIVATE_KEY", "private")
        clean_env.setenv("PORT", "not-a-port")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        message = str(exc_info.value)
        assert "PORT" in message
        assert "VAPID" not in message

    def test_names_missing_keys(self, clean_env) -> None:
        clean_env.setenv("VAPID_PUBLIC_KEY", "public")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "VAPID_PRIVATE_KEY" in str(exc_info.value)
        assert "VAPID_PUBLIC_KEY" not in str(exc_info.value)
