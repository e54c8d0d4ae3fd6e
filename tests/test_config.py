import os

from liftmeet.config import BaseConfig, DevConfig, ProdConfig, TestConfig, get_config


def test_get_config_by_name(monkeypatch):
    monkeypatch.delenv("FLASK_ENV", raising=False)
    assert get_config("testing") is TestConfig
    assert get_config("PRODUCTION") is ProdConfig
    assert get_config(None) is DevConfig
    assert get_config("staging") is DevConfig


def test_get_config_from_environment(monkeypatch):
    monkeypatch.setenv("FLASK_ENV", "testing")
    assert get_config(None) is TestConfig


def test_sqlite_file_paths(tmp_path):
    instance = str(tmp_path)
    assert BaseConfig.get_db_path(instance, "sqlite:///meet.db") == os.path.join(instance, "meet.db")
    assert BaseConfig.get_db_path(instance, "sqlite:////var/lib/meet.db") == "/var/lib/meet.db"


def test_no_file_for_memory_or_server_databases(tmp_path):
    assert BaseConfig.get_db_path(str(tmp_path), "sqlite://") is None
    assert BaseConfig.get_db_path(str(tmp_path), "postgresql://meet@localhost/meet") is None
