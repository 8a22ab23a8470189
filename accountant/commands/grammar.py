"""Compiled patterns for the chat command grammar.

    /command     leading slash, letters, digits and underscore
    @handle      participant handle
    12.34        monetary amount, up to two fraction digits

A Grammar is built once at startup and handed to every command's parse().
"""

import re


class Grammar:
    """Stateless holder of the compiled command patterns."""

    def __init__(self):
        self.command_re = re.compile(r"^/[a-zA-Z_0-9]+")
        self.handle_re = re.compile(r"@[a-zA-Z_0-9]+")
        self.amount_re = re.compile(r"[0-9]+[.]?[0-9]{0,2}")
        self.number_re = re.compile(r"[0-9]+")

    def keyword(self, text):
        """Return the leading /command, or "" if the text has none."""
        m = self.command_re.match(text)
        return m.group(0) if m else ""

    def handles(self, text):
        return self.handle_re.findall(text)

    def first_handle(self, text):
        m = self.handle_re.search(text)
        return m.group(0) if m else None

    def amounts(self, text):
        """Find amount tokens anywhere in text, handles included.

        Returns (tokens, leftover) where leftover is whatever text is neither
        a handle nor an amount, with separators stripped.
        """
        tokens = self.amount_re.findall(text)
        leftover = self.amount_re.sub(" ", self.handle_re.sub(" ", text))
        leftover = " ".join(leftover.replace("+", " ").replace(",", " ").split())
        return tokens, leftover

    def first_number(self, text):
        m = self.number_re.search(text)
        return m.group(0) if m else None

    def __repr__(self):
        return f"Grammar({self.command_re.pattern!r})"
