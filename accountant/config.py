"""Process settings, read from the environment.

    BOT_TG_TOKEN         Telegram bot token (or TELEGRAM_TOKEN in telegram_credentials.py)
    BOT_DB_HOST          MongoDB host; when unset, ledgers go to a JSON file
    BOT_DB_NAME          MongoDB database name
    BOT_DB_USERNAME      MongoDB user
    BOT_DB_PASSWORD      MongoDB password
    BOT_DATA_PATH        JSON ledger file (default data/bills.json)
    BOT_LOG_PATH         request log file (default accountant.log, empty disables)
    BOT_SUPPORT_HANDLE   who to contact when the bot is broken, e.g. @admin
    BOT_DEBUG            "1"/"true" enables debug logging
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

# Project root, next to the accountant package directory
_ROOT = Path(__file__).resolve().parent.parent


@dataclass
class Settings:
    token: Optional[str] = None
    db_host: Optional[str] = None
    db_name: Optional[str] = None
    db_username: Optional[str] = None
    db_password: Optional[str] = None
    data_path: Path = _ROOT / "data" / "bills.json"
    log_path: Optional[Path] = _ROOT / "accountant.log"
    support_handle: Optional[str] = None
    debug: bool = False


def _flag(value):
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def _token(environ):
    try:
        from accountant.telegram_credentials import TELEGRAM_TOKEN
        return TELEGRAM_TOKEN
    except ImportError:
        return environ.get("BOT_TG_TOKEN") or None


def load_settings(environ=None):
    env = os.environ if environ is None else environ
    settings = Settings(
        token=_token(env),
        db_host=env.get("BOT_DB_HOST") or None,
        db_name=env.get("BOT_DB_NAME") or None,
        db_username=env.get("BOT_DB_USERNAME") or None,
        db_password=env.get("BOT_DB_PASSWORD") or None,
        support_handle=env.get("BOT_SUPPORT_HANDLE") or None,
        debug=_flag(env.get("BOT_DEBUG")),
    )
    if env.get("BOT_DATA_PATH"):
        settings.data_path = Path(env["BOT_DATA_PATH"])
    if "BOT_LOG_PATH" in env:
        settings.log_path = Path(env["BOT_LOG_PATH"]) if env["BOT_LOG_PATH"] else None
    return settings
