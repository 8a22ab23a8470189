"""Add command: record a shared payment.

Handles:
    "/add @alice @bob 30"
    "/add @alice @bob 10 + 5.50"   (amounts are summed)
    "/add @alice @bob"             (amount defaults to 0)

Amounts are read from the whole argument text, digits inside handles
included, so "/add @bob1 10" records 11.00.
Anything that is neither a handle nor an amount is ignored when at least one
amount is present ("/add @alice paid 10"); with no amount at all it is
reported as unparsable ("/add @alice ten").
"""

from decimal import Decimal, InvalidOperation

from accountant.commands.parse import Parse, CannotParse
from accountant.ledger import format_amount, to_cents

KEYWORD = "/add"


def parse(text, grammar):
    index = text.find(" ")
    if index == -1:
        return CannotParse(command="add_item")
    raw = text[index + 1:]

    members = grammar.handles(raw)
    tokens, leftover = grammar.amounts(raw)
    if not tokens and leftover:
        return CannotParse(command="add_item", value=leftover)

    amounts = []
    for token in tokens:
        try:
            amounts.append(Decimal(token))
            # Total must fit in cents at the default precision
            to_cents(sum(amounts, Decimal(0)))
        except InvalidOperation:
            return CannotParse(command="add_item", value=token)

    return Parse(command="add_item", raw_args=raw,
                 args={"members": members, "amounts": amounts})


def handle(p, ledger):
    total = ledger.add_item(p.args["amounts"], p.args["members"])
    return f"Added a payment of {format_amount(total)}", True
