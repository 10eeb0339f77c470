from app.core.config import Settings


def test_database_uri_is_assembled_from_parts():
    config = Settings(
        DATABASE_URI=None,
        POSTGRES_USER="bugs",
        POSTGRES_PASSWORD="pw",
        POSTGRES_SERVER="db",
        POSTGRES_PORT="6543",
        POSTGRES_DB="tracker",
    )

    assert config.DATABASE_URI == "postgresql+asyncpg://bugs:pw@db:6543/tracker"


def test_cors_origins_accept_comma_list():
    config = Settings(BACKEND_CORS_ORIGINS="http://a.example.com, http://b.example.com")

    assert [str(origin).rstrip("/") for origin in config.BACKEND_CORS_ORIGINS] == [
        "http://a.example.com",
        "http://b.example.com",
    ]


def test_environment_drives_production_flag():
    assert Settings(ENVIRONMENT="Production").is_production
    assert not Settings(ENVIRONMENT="development").is_production


def test_every_setting_has_a_consumer():
    # Engine echo is controlled by SQL_ECHO and error detail by ENVIRONMENT
    assert "DEBUG" not in Settings.model_fields
    assert {"SQL_ECHO", "ENVIRONMENT", "LOG_LEVEL"} <= set(Settings.model_fields)
