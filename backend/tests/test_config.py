"""
Settings loading: environment overrides and .env support.
"""

from smartour.core.config import Settings


class TestSettings:

    def test_reads_dotenv_file(self):
        assert Settings.model_config["env_file"] == ".env"

    def test_environment_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv("LOGIN_RATE_LIMIT", "5/minute")
        monkeypatch.setenv("DATABASE_POOL_SIZE", "3")

        settings = Settings(_env_file=None)

        assert settings.login_rate_limit == "5/minute"
        assert settings.database_pool_size == 3

    def test_dotenv_values_are_used(self, tmp_path, monkeypatch):
        monkeypatch.delenv("DASHBOARD_USERNAME", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("DASHBOARD_USERNAME=operator\nUNRELATED_KEY=1\n")

        settings = Settings(_env_file=env_file)

        assert settings.dashboard_username == "operator"
