"""MongoDB ledger store: one document per chat in the "bill" collection.

Documents look like:
    {"id": <chat id>, "accountant": "@carol",
     "items": [{"amount": "30.00", "members": ["@alice", "@bob"]}]}
"""

from pymongo import MongoClient
from pymongo.errors import PyMongoError

from accountant.ledger import Ledger
from accountant.store import StoreError

COLLECTION = "bill"


def _selector(chat_id):
    return {"id": chat_id}


class MongoLedgerStore:

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def connect(cls, host, database, username=None, password=None, timeout=60):
        """Open a client and return a store on database.bill."""
        client = MongoClient(
            host,
            username=username or None,
            password=password or None,
            authSource=database,
            serverSelectionTimeoutMS=timeout * 1000,
        )
        print(f"[MongoDB] Connected to database: {database}", flush=True)
        return cls(client[database][COLLECTION])

    def load(self, chat_id):
        try:
            doc = self.collection.find_one(_selector(chat_id))
        except PyMongoError as e:
            raise StoreError(f"Error finding a bill in DB: {e}") from e
        if doc is None:
            return None
        doc.pop("_id", None)
        try:
            return Ledger.from_dict(doc)
        except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as e:
            raise StoreError(f"Corrupt bill for chat {chat_id}: {e}") from e

    def save(self, ledger):
        try:
            self.collection.replace_one(_selector(ledger.chat_id), ledger.to_dict(),
                                        upsert=True)
        except PyMongoError as e:
            raise StoreError(f"Error updating a bill in DB: {e}") from e
