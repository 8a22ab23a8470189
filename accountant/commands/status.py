"""Status command: list bill items and the default payer.

Handles:
    "/status"
"""

from accountant.commands.parse import Parse
from accountant.ledger import format_amount

KEYWORD = "/status"


def parse(text, grammar):
    return Parse(command="status", raw_args=text[len(KEYWORD):])


def format_status(status):
    lines = ["Bill items:" if status.rows else "Bill is empty"]
    for row in status.rows:
        by = " ".join(["by"] + row.members)
        lines.append(f"{row.index}. *{format_amount(row.amount)}* {by}")
    return "\n".join(lines) + f"\n\nDefault payer is {status.payer}"


def handle(p, ledger):
    return format_status(ledger.status()), False
