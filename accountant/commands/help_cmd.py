"""Help command: list every command with an example.

Handles:
    "/help"
"""

from accountant.commands.parse import Parse

KEYWORD = "/help"

HELP_TEXT = (
    "Hi, I'm the Party Accountant Bot\n"
    "I can help you calculate debts after party\n\n"
    "You can use following commands:\n"
    "/help - show help info\n"
    "/payer - set default payer, e.g. /payer @carol\n"
    "/add - add a bill item, e.g. /add @alice @bob 30 + 12.50\n"
    "    (words other than handles need an amount next to them,\n"
    "    /add @alice ten is refused)\n"
    "/remove - remove a bill item, e.g. /remove 2\n"
    "/status - show list of bill items and default payer\n"
    "/solve - calculate debts\n"
    "/clear - clear list of bill items\n"
)


def parse(text, grammar):
    return Parse(command="help", raw_args=text[len(KEYWORD):])


def handle(p, ledger):
    return HELP_TEXT, False
