"""Payer command: choose who receives everyone's transfers.

Handles:
    "/payer @carol"
"""

from accountant.commands.parse import Parse, CannotParse

KEYWORD = "/payer"


def parse(text, grammar):
    raw = text[len(KEYWORD):]
    handle = grammar.first_handle(raw)
    if handle is None:
        return CannotParse(command="set_payer")
    return Parse(command="set_payer", raw_args=raw, args={"payer": handle})


def handle(p, ledger):
    ledger.set_payer(p.args["payer"])
    return f"Set {p.args['payer']} as accountant", True
