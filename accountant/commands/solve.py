"""Solve command: work out who pays how much to the default payer.

Handles:
    "/solve"
"""

from accountant.commands.parse import Parse
from accountant.ledger import format_amount
from accountant.settlement import settle

KEYWORD = "/solve"


def parse(text, grammar):
    return Parse(command="solve", raw_args=text[len(KEYWORD):])


def format_transfers(transfers):
    if not transfers:
        return "Payments:\n\nNobody owes anything"
    lines = [f"*{format_amount(t.amount)}* from {t.sender} to {t.recipient}"
             for t in transfers]
    return "Payments:\n\n" + "\n".join(lines)


def handle(p, ledger):
    return format_transfers(settle(ledger.items, ledger.payer)), False
