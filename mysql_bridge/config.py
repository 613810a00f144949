# mysql_bridge/config.py

import configparser
import os
from pathlib import Path
from typing import Dict, Any, Optional

from dotenv import load_dotenv

# Pick up DB_* variables from a .env file in the working directory, if any
load_dotenv()

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3306


def _creds(database, user, password, host=None, port=None) -> Dict[str, Any]:
    return {
        "driver": "mysql",
        "host": host or DEFAULT_HOST,
        "port": int(port) if port else DEFAULT_PORT,
        "database": database,
        "user": user,
        "password": password,
    }


def _creds_from_env() -> Optional[Dict[str, Any]]:
    """Creds from DB_NAME/DB_USER/DB_PASS (+ optional DB_HOST/DB_PORT), or None if incomplete."""
    required = [os.getenv(var) for var in ("DB_NAME", "DB_USER", "DB_PASS")]
    if not all(required):
        return None
    return _creds(*required, host=os.getenv("DB_HOST"), port=os.getenv("DB_PORT"))


def _config_path() -> Path:
    override = os.getenv("MYSQL_BRIDGE_CONFIG", "").strip()
    if override and Path(override).is_file():
        return Path(override)
    home = os.getenv("HOME") or os.getenv("USERPROFILE")
    return (Path(home) if home else Path.home()) / ".mysql_bridge.cfg"


def _active_section(cfg: configparser.ConfigParser, profile_name: Optional[str], cfg_path: Path) -> str:
    active = profile_name or cfg.defaults().get("active")
    if not active:
        if not cfg.sections():
            raise RuntimeError(f"No profiles defined in {cfg_path}")
        return cfg.sections()[0]
    if not cfg.has_section(active):
        raise RuntimeError(f"Profile '{active}' not found in {cfg_path}")
    return active


def load_config(profile_name: str = None) -> Dict[str, Any]:
    """
    Load MySQL credentials.

    Without a profile name, complete DB_* environment variables win. Otherwise
    the profile is read from $MYSQL_BRIDGE_CONFIG (when that file exists) or
    ~/.mysql_bridge.cfg, defaulting to [DEFAULT].active and then the first section.

    Returns:
        A dict: driver, host, port, database, user, password

    Raises:
        RuntimeError: If no usable config or profile is found.
    """
    if not profile_name:
        env_creds = _creds_from_env()
        if env_creds:
            return env_creds

    cfg_path = _config_path()
    if not cfg_path.is_file():
        raise RuntimeError(
            f"No DB config found at {cfg_path}. Set DB_NAME/DB_USER/DB_PASS in ENV, "
            "create ~/.mysql_bridge.cfg or set MYSQL_BRIDGE_CONFIG correctly."
        )

    cfg = configparser.ConfigParser()
    cfg.read(cfg_path)
    active = _active_section(cfg, profile_name, cfg_path)
    sect = cfg[active]

    driver = sect.get("driver", "mysql").lower()
    if driver != "mysql":
        raise RuntimeError(f"Profile '{active}' uses unsupported driver: {driver}")

    return _creds(
        sect.get("database") or sect.get("name"),
        sect["user"],
        sect["password"],
        host=sect.get("host"),
        port=sect.get("port"),
    )
