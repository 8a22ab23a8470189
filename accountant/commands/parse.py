"""Parse objects for the command system.

Each command module's parse(text, grammar) returns a Parse, or a CannotParse
when the arguments are malformed. The router passes a Parse to handle(parse, ledger)
and turns a CannotParse into a diagnostic without touching the ledger.
"""

from dataclasses import dataclass, field
from typing import Optional

HELP_POINTER = "Send */help* to show help info"


@dataclass
class Parse:
    command: str           # e.g. "add_item", "set_payer", "solve"
    raw_args: str = ""     # text after the command keyword
    args: dict = field(default_factory=dict)
    module: object = None  # reference to the module, set by router


@dataclass
class CannotParse:
    command: str
    value: Optional[str] = None  # offending token, None if the whole message is malformed
    module: object = None

    def message(self):
        if self.value is None:
            return "I cannot parse your message :(\n" + HELP_POINTER
        return f"I cannot parse value {self.value} :(\n" + HELP_POINTER
