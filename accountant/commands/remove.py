"""Remove command: delete one bill item by its 1-based position.

Handles:
    "/remove 2"
"""

from accountant.commands.parse import Parse, CannotParse
from accountant.ledger import ItemIndexError

KEYWORD = "/remove"


def parse(text, grammar):
    raw = text[len(KEYWORD):]
    digits = grammar.first_number(raw)
    if digits is None:
        return CannotParse(command="remove_item", value=raw.strip() or None)
    try:
        index = int(digits)
    except ValueError:
        return CannotParse(command="remove_item", value=digits)
    return Parse(command="remove_item", raw_args=raw, args={"index": index})


def handle(p, ledger):
    try:
        ledger.remove_item(p.args["index"])
    except ItemIndexError as e:
        return str(e), False
    return "Bill item has been removed", True
