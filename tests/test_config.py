import json
import logging

import pytest
from pydantic import ValidationError

from pg_reporting.config.logging import (
    CustomJsonFormatter,
    build_logging_config,
    get_logger,
    report_context,
    setup_logging,
)
from pg_reporting.config.settings import Settings
from pg_reporting.core.exceptions import CacheSchemaError, DatabaseError, ErrorCode
from pg_reporting.db.session import Database
from pg_reporting.models.enums import PgType, ReportType


def test_database_url_uses_async_driver():
    assert Settings(DATABASE_URL="postgresql://u:p@db:5432/pg").get_database_url() == (
        "postgresql+asyncpg://u:p@db:5432/pg"
    )
    built = Settings(DATABASE_URL=None, DB_HOST="db", DB_NAME="reports").get_database_url()
    assert built.startswith("postgresql+asyncpg://")
    assert built.endswith("@db:5432/reports")


def test_settings_validation():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
    with pytest.raises(ValidationError):
        Settings(PAYMENT_GRACE_DAYS=-1)


def test_reporting_defaults():
    config = Settings()
    assert config.REPORT_TIMEZONE == "Asia/Kolkata"
    assert config.PAYMENT_GRACE_DAYS >= 0


def test_json_formatter_carries_report_identity():
    formatter = CustomJsonFormatter("%(message)s")
    record = logging.LogRecord("pg_reporting.test", logging.INFO, __file__, 1, "cached", None, None)
    for key, value in report_context(PgType.MENS, ReportType.WEEKLY, 9, 2024).items():
        setattr(record, key, value)

    payload = json.loads(formatter.format(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "pg_reporting.test"
    assert payload["segment"] == "mens"
    assert payload["report_type"] == "weekly"
    assert payload["period"] == 9


def test_logging_config_writes_to_log_dir(tmp_path):
    config = build_logging_config(str(tmp_path))
    assert config["handlers"]["json_file"]["filename"] == str(tmp_path / "app.json.log")
    assert "apscheduler" in config["loggers"]


def test_setup_logging_creates_log_files(tmp_path):
    log_dir = tmp_path / "logs"
    try:
        logger = setup_logging(str(log_dir))
        logger.info("ready")
        assert (log_dir / "app.log").exists()
    finally:
        for name in ("", "pg_reporting", "sqlalchemy.engine", "apscheduler"):
            target = logging.getLogger(name)
            for handler in list(target.handlers):
                target.removeHandler(handler)
                handler.close()


def test_exceptions_serialize():
    error = CacheSchemaError(3, 1)
    assert error.error_code == ErrorCode.CACHE_SCHEMA_MISMATCH
    assert error.to_dict()["error"]["details"] == {"found_version": 3, "expected_version": 1}
    assert str(DatabaseError("boom")) == "DATABASE_ERROR: boom"


async def test_database_from_settings_drops_pool_options_for_sqlite():
    database = Database.from_settings(Settings(DATABASE_URL="sqlite+aiosqlite://"))
    try:
        await database.create_all()
        async with database.session() as session:
            assert session.bind is database.engine
    finally:
        await database.dispose()


def test_get_logger_returns_standard_logger():
    assert get_logger("pg_reporting.jobs") is logging.getLogger("pg_reporting.jobs")
