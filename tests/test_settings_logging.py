"""Tests for settings, logging configuration and the composition root."""

import logging

import pytest
from pydantic import ValidationError as PydanticValidationError

from lexdesk.bootstrap import build_container
from lexdesk.config.logging_config import LoggingConfig, get_log_level_from_verbosity
from lexdesk.config.settings import LexdeskSettings
from lexdesk.features.tenancy.entities.tenant import ProvisioningPolicy


class TestSettings:

    def test_defaults(self):
        settings = LexdeskSettings(_env_file=None)

        assert settings.admin_schema == "public"
        assert settings.tenant_schema_prefix == "tenant_"
        assert settings.provisioning_policy == "strict"
        assert not settings.is_production

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("PROVISIONING_POLICY", "lazy")
        monkeypatch.setenv("DB_POOL_MAX_SIZE", "7")
        monkeypatch.setenv("ENVIRONMENT", "production")

        settings = LexdeskSettings(_env_file=None)

        assert settings.provisioning_policy == "lazy"
        assert settings.get_pool_config()["max_size"] == 7
        assert settings.is_production

    def test_sqlalchemy_url_is_normalized(self):
        settings = LexdeskSettings(_env_file=None, database_url="postgresql+asyncpg://u:p@db/lexdesk")

        assert settings.database_url == "postgresql://u:p@db/lexdesk"

    @pytest.mark.parametrize("prefix", ["Tenant_", "1tenant_", "ten-ant_", ""])
    def test_invalid_tenant_prefix(self, prefix):
        with pytest.raises(PydanticValidationError):
            LexdeskSettings(_env_file=None, tenant_schema_prefix=prefix)

    def test_unknown_policy(self):
        with pytest.raises(PydanticValidationError):
            LexdeskSettings(_env_file=None, provisioning_policy="eager")


class TestLoggingConfig:

    @pytest.mark.parametrize("verbosity,level", [
        ("quiet", "ERROR"),
        ("NORMAL", "WARNING"),
        ("verbose", "INFO"),
        ("debug", "DEBUG"),
        ("nonsense", "WARNING"),
    ])
    def test_verbosity_mapping(self, verbosity, level):
        assert get_log_level_from_verbosity(verbosity) == level

    def test_sql_loggers_quiet_by_default(self):
        config = LoggingConfig.build_config()

        assert config["loggers"]["lexdesk.features.tenancy.services.query_executor"]["level"] == "WARNING"
        assert config["loggers"]["asyncpg"]["level"] == "WARNING"

    def test_sql_logging_enabled(self):
        config = LoggingConfig.build_config(enable_sql_logging=True, log_level="info")

        assert config["root"]["level"] == "INFO"
        assert config["loggers"]["asyncpg"]["level"] == "DEBUG"

    def test_configure_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        LoggingConfig.configure()

        assert logging.getLogger().level == logging.ERROR


class TestBuildContainer:

    def test_wires_policy_and_page_sizes(self, store):
        settings = LexdeskSettings(_env_file=None, provisioning_policy="lazy", default_page_size=10, max_page_size=20)

        container = build_container(settings, store=store)

        assert container.executor.policy == ProvisioningPolicy.LAZY
        assert container.store is store
        assert container.clients.pagination().per_page == 10

    @pytest.mark.asyncio
    async def test_startup_bootstraps_admin_tables(self, store):
        container = build_container(LexdeskSettings(_env_file=None), store=store)

        await container.startup()
        await container.shutdown()

        assert "tenants" in store.tables["public"]
        assert "registration_keys" in store.tables["public"]


class TestLoggingFromSettings:

    def test_settings_log_level(self):
        LoggingConfig.configure(LexdeskSettings(_env_file=None, log_level="ERROR"))

        assert logging.getLogger().level == logging.ERROR

    def test_settings_verbosity_without_level(self):
        LoggingConfig.configure(LexdeskSettings(_env_file=None, log_verbosity="verbose"))

        assert logging.getLogger().level == logging.INFO

    def test_settings_sql_logging(self):
        LoggingConfig.configure(LexdeskSettings(_env_file=None, enable_sql_logging=True))

        assert logging.getLogger("asyncpg").level == logging.DEBUG

    def test_log_level_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert LexdeskSettings(_env_file=None).log_level == "debug"

    def test_debug_is_off_by_default(self):
        settings = LexdeskSettings(_env_file=None)

        assert settings.debug is False
        assert settings.log_level is None
