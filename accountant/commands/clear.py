"""Clear command: drop all bill items, keeping the default payer.

Handles:
    "/clear"
"""

from accountant.commands.parse import Parse

KEYWORD = "/clear"


def parse(text, grammar):
    return Parse(command="clear", raw_args=text[len(KEYWORD):])


def handle(p, ledger):
    ledger.clear()
    return "Bill items have been removed", True
