# tests/test_config.py

import pytest

from mysql_bridge.config import load_config


# Fixture to write a temp config and point at it
@pytest.fixture
def tmp_config(tmp_path, monkeypatch):
    ini_path = tmp_path / "test_config.ini"
    INI = """
[DEFAULT]
active = alpha

[alpha]
host     = db.internal
database = alpha_db
user     = alpha_user
password = alpha_pass

[bravo]
driver   = mysql
port     = 3307
name     = bravo_db
user     = user
password = pass

[charlie]
driver   = sqlite
database = /tmp/charlie.db
"""
    ini_path.write_text(INI)
    monkeypatch.setenv("MYSQL_BRIDGE_CONFIG", str(ini_path))
    monkeypatch.setenv("HOME", str(tmp_path))
    return ini_path


def test_load_default(tmp_config):
    creds = load_config()
    assert creds == {
        "driver": "mysql",
        "host": "db.internal",
        "port": 3306,
        "database": "alpha_db",
        "user": "alpha_user",
        "password": "alpha_pass",
    }


def test_load_named_profile(tmp_config):
    creds = load_config("bravo")
    assert creds["host"] == "localhost"
    assert creds["port"] == 3307
    assert creds["database"] == "bravo_db"


def test_first_section_when_no_active(tmp_path, monkeypatch):
    ini_path = tmp_path / "no_active.ini"
    ini_path.write_text("[only]\nuser = u\npassword = p\ndatabase = d\n")
    monkeypatch.setenv("MYSQL_BRIDGE_CONFIG", str(ini_path))
    assert load_config()["database"] == "d"


def test_missing_profile_raises(tmp_config):
    with pytest.raises(RuntimeError):
        load_config("delta")


def test_non_mysql_profile_raises(tmp_config):
    with pytest.raises(RuntimeError, match="unsupported driver"):
        load_config("charlie")


def test_env_takes_precedence(tmp_config, monkeypatch):
    monkeypatch.setenv("DB_NAME", "env_db")
    monkeypatch.setenv("DB_USER", "env_user")
    monkeypatch.setenv("DB_PASS", "env_pass")
    monkeypatch.setenv("DB_PORT", "3310")
    creds = load_config()
    assert creds["database"] == "env_db"
    assert creds["host"] == "localhost"
    assert creds["port"] == 3310


def test_named_profile_ignores_env(tmp_config, monkeypatch):
    monkeypatch.setenv("DB_NAME", "env_db")
    monkeypatch.setenv("DB_USER", "env_user")
    monkeypatch.setenv("DB_PASS", "env_pass")
    assert load_config("bravo")["database"] == "bravo_db"


def test_missing_file_raises(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    with pytest.raises(RuntimeError, match="No DB config found"):
        load_config()
