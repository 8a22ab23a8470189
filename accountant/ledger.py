"""Per-chat bill: the designated payer and the ordered list of shared payments.

A Ledger is created lazily for each chat and mutated by the /payer, /add,
/remove and /clear commands. Item indices shown to users are 1-based and
always gapless.
"""

import copy
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

CENTS = Decimal("0.01")
UNSET = "unset"


def to_cents(value):
    """Round a Decimal to 2 decimal places."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(value):
    return str(to_cents(value))


class ItemIndexError(IndexError):
    """Raised when a 1-based item index is outside [1, len(items)]."""

    def __init__(self, index, size):
        self.index = index
        self.size = size
        super().__init__(f"Index {index} is invalid. Index must be in range [1, {size}]")


@dataclass
class ExpenseItem:
    amount: Decimal
    members: List[str] = field(default_factory=list)  # display order, duplicates kept

    def to_dict(self):
        return {"amount": str(self.amount), "members": list(self.members)}

    @classmethod
    def from_dict(cls, data):
        # Older records stored floats; str() keeps the printed value
        return cls(amount=to_cents(str(data.get("amount", 0))),
                   members=list(data.get("members") or []))


@dataclass
class StatusRow:
    index: int
    amount: Decimal
    members: List[str]


@dataclass
class Status:
    rows: List[StatusRow]
    payer: str  # handle or UNSET


@dataclass
class Ledger:
    chat_id: int
    payer: Optional[str] = None
    items: List[ExpenseItem] = field(default_factory=list)

    def set_payer(self, handle):
        self.payer = handle

    def add_item(self, amounts, members):
        """Append a payment whose amount is the sum of all amount tokens.

        Returns the recorded total (0.00 when no amounts were given).
        """
        total = to_cents(sum((Decimal(a) for a in amounts), Decimal(0)))
        self.items.append(ExpenseItem(amount=total, members=list(members)))
        return total

    def remove_item(self, index):
        """Remove and return the item at a 1-based index."""
        if index < 1 or index > len(self.items):
            raise ItemIndexError(index, len(self.items))
        return self.items.pop(index - 1)

    def clear(self):
        self.items = []

    def status(self):
        rows = [StatusRow(index=i, amount=item.amount, members=list(item.members))
                for i, item in enumerate(self.items, 1)]
        return Status(rows=rows, payer=self.payer or UNSET)

    def snapshot(self):
        return copy.deepcopy(self)

    def to_dict(self):
        return {
            "id": self.chat_id,
            "accountant": self.payer or "",
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            chat_id=int(data["id"]),
            payer=data.get("accountant") or None,
            items=[ExpenseItem.from_dict(d) for d in data.get("items") or []],
        )
