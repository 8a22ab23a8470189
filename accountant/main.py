"""Party Accountant main entry: wire settings, ledger store and the Telegram bot.

Usage:
    python -m accountant
"""

from accountant.commands.grammar import Grammar
from accountant.commands.router import Dispatcher
from accountant.config import load_settings
from accountant.store import JsonLedgerStore


def log(msg):
    print(msg, flush=True)


def open_store(settings):
    """MongoDB when BOT_DB_HOST is set, otherwise the JSON file."""
    if settings.db_host:
        from accountant.mongo_store import MongoLedgerStore
        log(f"Connecting to MongoDB at {settings.db_host}...")
        return MongoLedgerStore.connect(
            settings.db_host, settings.db_name or "accountant",
            username=settings.db_username, password=settings.db_password)
    log(f"Storing bills in {settings.data_path}")
    return JsonLedgerStore(settings.data_path)


def main():
    settings = load_settings()
    if not settings.token:
        log("No BOT_TG_TOKEN or telegram_credentials.py. Telegram disabled.")
        return 1

    dispatcher = Dispatcher(
        open_store(settings),
        grammar=Grammar(),
        support_handle=settings.support_handle,
        log_path=settings.log_path,
        debug=settings.debug,
    )

    from accountant.telegram_bot import run_telegram
    try:
        failed = run_telegram(settings.token, dispatcher)
    except KeyboardInterrupt:
        log("\nShutting down.")
        return 0
    if failed:
        log("[ERROR] Stopped after a ledger storage failure.")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
