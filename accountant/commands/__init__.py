from accountant.commands import (
    help_cmd, payer, add, remove, status, solve, clear,
)

ALL_COMMANDS = [
    help_cmd, payer, add, remove, status, solve, clear,
]
