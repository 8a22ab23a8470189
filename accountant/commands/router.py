"""Command router: picks the command module by keyword and runs it against a chat's ledger.

Each command module must provide:
    KEYWORD                                  # e.g. "/add"
    parse(text, grammar) -> Parse | CannotParse
    handle(parse, ledger) -> (response, changed)

Every dispatch loads (or creates) the chat's ledger, runs the command and
saves the ledger if the command changed it. The whole sequence holds a
per-chat lock, so two messages for one chat never interleave.
"""

import threading
import weakref
from dataclasses import dataclass
from datetime import datetime

from accountant.commands import ALL_COMMANDS
from accountant.commands.grammar import Grammar
from accountant.commands.parse import CannotParse
from accountant.ledger import Ledger
from accountant.store import StoreError

UNSUPPORTED = ("This command is not supported\n"
               "Send */help* to show all available commands")


@dataclass
class Response:
    text: str
    ok: bool = True  # False when the ledger could not be loaded or saved


def _log(msg):
    print(msg, flush=True)


def module_name(module):
    return module.__name__.split(".")[-1]


class Dispatcher:

    def __init__(self, store, grammar=None, commands=ALL_COMMANDS,
                 support_handle=None, log_path=None, debug=False):
        self.store = store
        self.grammar = grammar or Grammar()
        self.commands = {cmd.KEYWORD: cmd for cmd in commands}
        self.support_handle = support_handle
        self.log_path = log_path
        self.debug = debug
        self._locks = weakref.WeakValueDictionary()  # dropped once no dispatch holds them
        self._locks_guard = threading.Lock()

    def _debug(self, msg):
        if self.debug:
            _log(f"[DEBUG] {msg}")

    def _chat_lock(self, chat_id):
        with self._locks_guard:
            lock = self._locks.get(chat_id)
            if lock is None:
                lock = self._locks[chat_id] = threading.Lock()
            return lock

    def _apology(self):
        contact = self.support_handle or "the bot owner"
        return ("There seem to be problems with this bot\n"
                f"Please send a message to {contact} about it")

    def _log_request(self, text, p, source):
        """Append a compact 2-line entry to the request log, if configured."""
        if not self.log_path:
            return
        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        if p is None:
            parse_line = "  -> none"
        elif isinstance(p, CannotParse):
            parse_line = f"  -> {module_name(p.module)}.{p.command}, cannot parse {p.value!r}"
        else:
            parts = [f"{module_name(p.module)}.{p.command}"]
            for k, v in p.args.items():
                parts.append(f"{k}={v!r}")
            parse_line = f"  -> {', '.join(parts)}"
        try:
            with open(self.log_path, "a") as f:
                f.write(f"{ts} {source}  {text}\n{parse_line}\n")
        except OSError:
            pass

    def parse(self, text):
        """Parse text with the module registered for its keyword.

        Returns a Parse, a CannotParse, or None for unsupported commands.
        """
        keyword = self.grammar.keyword(text)
        module = self.commands.get(keyword)
        if module is None:
            return None
        p = module.parse(text, self.grammar)
        p.module = module
        return p

    def run(self, p, ledger):
        """Apply a parse to a ledger. Returns (response, changed)."""
        if p is None:
            self._debug("Command is not supported")
            return UNSUPPORTED, False
        if isinstance(p, CannotParse):
            self._debug(f"Message parsing failed: {p.command} {p.value!r}")
            return p.message(), False
        self._debug(f"Parsed message: {p.command} {p.args}")
        return p.module.handle(p, ledger)

    def dispatch(self, chat_id, text, source="[chat]"):
        """Run one inbound message for a chat.

        Args:
            chat_id: Chat identifier; one ledger per chat.
            text: Raw message text.
            source: Source tag for logging, e.g. "[Telegram:@alice]".

        Returns:
            Response. ok is False when persistence failed; the text is then
            an apology and the caller should escalate.
        """
        p = self.parse(text)
        self._log_request(text, p, source)
        _log(f"[INFO] Processing {self.grammar.keyword(text) or 'empty'} command...")

        lock = self._chat_lock(chat_id)
        with lock:
            try:
                ledger = self.store.load(chat_id)
                if ledger is None:
                    ledger = Ledger(chat_id=chat_id)
                    self.store.save(ledger)
                    self._debug(f"Added new bill {ledger}")
            except StoreError as e:
                _log(f"[ERROR] {e}")
                return Response(self._apology(), ok=False)

            response, changed = self.run(p, ledger)

            if changed:
                try:
                    self.store.save(ledger)
                except StoreError as e:
                    _log(f"[ERROR] {e}")
                    return Response(self._apology(), ok=False)

        return Response(response)
