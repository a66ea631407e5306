"""Settings parsing and database pool bounds"""

from rentacar.config import Settings
from rentacar.database import POOL_OPTIONS, _clamped_env_int, get_runtime_db_pool_settings


def test_log_level_is_normalized():
    assert Settings(database_url="sqlite://", log_level=" debug ").log_level == "DEBUG"
    assert Settings(database_url="sqlite://", log_level="chatty").log_level == "INFO"


def test_environment_flags():
    dev = Settings(database_url="sqlite:///rentacar.db", flask_env="Development")
    prod = Settings(database_url="mysql+pymysql://u:p@db/rentacar", flask_env="production")
    assert dev.is_dev() and dev.is_sqlite()
    assert not prod.is_dev() and not prod.is_sqlite()


def test_pool_values_are_clamped(monkeypatch):
    name, default, low, high = POOL_OPTIONS["pool_size"]
    monkeypatch.setenv(name, "500")
    assert _clamped_env_int(name, default, low, high) == high
    monkeypatch.setenv(name, "0")
    assert _clamped_env_int(name, default, low, high) == low
    monkeypatch.setenv(name, "not-a-number")
    assert _clamped_env_int(name, default, low, high) == default
    monkeypatch.delenv(name)
    assert _clamped_env_int(name, default, low, high) == default


def test_sqlite_runtime_has_no_pool():
    runtime = get_runtime_db_pool_settings()
    assert runtime["database_backend"] == "sqlite"
    assert runtime["pool_size"] is None


def test_wsgi_entry_serves_the_app(monkeypatch):
    # keep the entry module's FLASK_ENV default out of the test process
    monkeypatch.setenv("FLASK_ENV", "testing")
    import wsgi

    assert {"bookings", "vehicles"} <= set(wsgi.application.blueprints)
    assert wsgi.application.test_client().get("/health").get_json() == {"status": "healthy"}
