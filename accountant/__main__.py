"""Entry point for `python -m accountant`."""

import sys


def format_value(val):
    """Render an arg value the way tests/test_cases.txt spells it."""
    if isinstance(val, list):
        if not val:
            return "empty"
        return " ".join(str(v) for v in val)
    if val is None:
        return "none"
    return str(val)


def _parse_cmd(text):
    """Parse a single input and print the result in test_cases.txt format."""
    from accountant.commands.parse import CannotParse
    from accountant.commands.router import Dispatcher, module_name
    from accountant.store import MemoryLedgerStore

    p = Dispatcher(MemoryLedgerStore()).parse(text)

    print(f"> {text}")

    if p is None:
        print("module: none")
        return

    print(f"module: {module_name(p.module)}")
    print(f"command: {p.command}")

    if isinstance(p, CannotParse):
        print(f"cannot_parse: {p.value if p.value is not None else 'message'}")
        return

    for key, val in p.args.items():
        print(f"{key}: {format_value(val)}")


if __name__ == "__main__" or not sys.argv[0]:
    if len(sys.argv) >= 3 and sys.argv[1] == "-parse":
        _parse_cmd(" ".join(sys.argv[2:]))
    else:
        from accountant.main import main
        sys.exit(main())
