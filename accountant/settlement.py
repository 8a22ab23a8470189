"""Debt settlement: everyone pays the designated payer their share.

Each item's amount is split evenly among its members (a handle listed twice
gets two shares). Items with no members are skipped. There is no netting
between participants; every non-payer with a positive total sends one
transfer to the payer.
"""

from dataclasses import dataclass
from decimal import Decimal

from accountant.ledger import UNSET


@dataclass(frozen=True)
class Transfer:
    sender: str
    amount: Decimal
    recipient: str


def owed_totals(items):
    """Return {handle: total share} over all items."""
    totals = {}
    for item in items:
        if not item.members:
            continue
        share = item.amount / len(item.members)
        for member in item.members:
            totals[member] = totals.get(member, Decimal(0)) + share
    return totals


def settle(items, payer=None):
    """Compute transfers toward payer, sorted by sender handle.

    The payer may be None; transfers are still computed and addressed to "unset".
    """
    recipient = payer or UNSET
    transfers = []
    for member, amount in sorted(owed_totals(items).items()):
        if member == payer or amount <= 0:
            continue
        transfers.append(Transfer(sender=member, amount=amount, recipient=recipient))
    return transfers
