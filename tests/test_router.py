"""End-to-end tests: message text in, response text out, ledger in a memory store."""

import json
import threading

import pytest

from accountant.commands.router import Dispatcher, UNSUPPORTED
from accountant.ledger import Ledger
from accountant.store import JsonLedgerStore, MemoryLedgerStore, StoreError

CHAT = -1001


@pytest.fixture
def store():
    return MemoryLedgerStore()


@pytest.fixture
def dispatcher(store):
    return Dispatcher(store, support_handle="@admin")


def send(dispatcher, *texts, chat_id=CHAT):
    response = None
    for text in texts:
        response = dispatcher.dispatch(chat_id, text)
    return response


def test_first_message_creates_ledger(dispatcher, store):
    response = send(dispatcher, "/status")
    assert response.ok
    assert response.text == "Bill is empty\n\nDefault payer is unset"
    assert store.load(CHAT) == Ledger(chat_id=CHAT)


def test_add_reports_total(dispatcher, store):
    response = send(dispatcher, "/add @alice paid 10 + 5.5")
    assert response.text == "Added a payment of 15.50"
    assert str(store.load(CHAT).items[0].amount) == "15.50"


def test_add_unparsable_amount(dispatcher, store):
    response = send(dispatcher, "/add @alice ten")
    assert response.ok
    assert response.text.startswith("I cannot parse value ten :(")
    assert "/help" in response.text
    assert store.load(CHAT).items == []


def test_add_without_arguments(dispatcher):
    response = send(dispatcher, "/add")
    assert response.text.startswith("I cannot parse your message :(")


def test_status_lists_items(dispatcher):
    response = send(dispatcher,
                    "/payer @carol",
                    "/add @alice @bob 30",
                    "/add @alice 20",
                    "/status")
    assert response.text == (
        "Bill items:\n"
        "1. *30.00* by @alice @bob\n"
        "2. *20.00* by @alice\n"
        "\n"
        "Default payer is @carol"
    )


def test_status_item_without_members(dispatcher):
    response = send(dispatcher, "/add 12", "/status")
    assert "1. *12.00* by\n" in response.text


def test_solve_golden(dispatcher):
    response = send(dispatcher,
                    "/add @alice @bob 30.00",
                    "/add @alice 20.00",
                    "/payer @carol",
                    "/solve")
    assert response.text == (
        "Payments:\n"
        "\n"
        "*35.00* from @alice to @carol\n"
        "*15.00* from @bob to @carol"
    )


def test_solve_without_payer(dispatcher):
    response = send(dispatcher, "/add @bob 10", "/solve")
    assert response.text.endswith("*10.00* from @bob to unset")


def test_solve_empty(dispatcher):
    assert send(dispatcher, "/solve").text == "Payments:\n\nNobody owes anything"


def test_solve_rounds_shares(dispatcher):
    response = send(dispatcher, "/payer @p", "/add @a @b @c 10", "/solve")
    assert response.text.count("*3.33*") == 3


def test_remove_shifts_indices(dispatcher, store):
    send(dispatcher, "/add @a 1", "/add @b 2", "/add @c 3")
    response = send(dispatcher, "/remove 2")
    assert response.text == "Bill item has been removed"
    status = send(dispatcher, "/status").text
    assert "1. *1.00* by @a\n2. *3.00* by @c\n" in status
    assert "@b" not in status


def test_remove_out_of_range(dispatcher, store):
    send(dispatcher, "/add @a 1", "/add @b 2", "/add @c 3")
    before = store.load(CHAT)
    response = send(dispatcher, "/remove 5")
    assert response.ok
    assert response.text == "Index 5 is invalid. Index must be in range [1, 3]"
    assert store.load(CHAT) == before


def test_remove_unparsable(dispatcher):
    response = send(dispatcher, "/add @a 1", "/remove first")
    assert response.text.startswith("I cannot parse value first :(")


def test_clear_keeps_payer(dispatcher, store):
    send(dispatcher, "/payer @carol", "/add @a 1", "/add @b 2")
    assert send(dispatcher, "/clear").text == "Bill items have been removed"
    assert send(dispatcher, "/status").text == "Bill is empty\n\nDefault payer is @carol"
    assert store.load(CHAT).payer == "@carol"


def test_payer_without_handle(dispatcher, store):
    response = send(dispatcher, "/payer carol")
    assert response.text.startswith("I cannot parse your message")
    assert store.load(CHAT).payer is None


@pytest.mark.parametrize("text", ["/status", "/solve", "/help"])
def test_read_only_commands_do_not_mutate(dispatcher, store, text):
    send(dispatcher, "/payer @carol", "/add @a @b 30", "/add @a 5")
    before = store.load(CHAT).snapshot()
    send(dispatcher, text, text)
    assert store.load(CHAT) == before


@pytest.mark.parametrize("text", ["/start", "hello", "", "/STATUS"])
def test_unsupported(dispatcher, text):
    response = send(dispatcher, text)
    assert response.ok
    assert response.text == UNSUPPORTED


def test_help_lists_commands(dispatcher):
    text = send(dispatcher, "/help").text
    for keyword in ("/help", "/payer", "/add", "/remove", "/status", "/solve", "/clear"):
        assert keyword in text


def test_chats_are_independent(dispatcher):
    send(dispatcher, "/add @a 10", chat_id=1)
    send(dispatcher, "/add @b 20", chat_id=2)
    assert "@b" not in send(dispatcher, "/status", chat_id=1).text
    assert "@a" not in send(dispatcher, "/status", chat_id=2).text


class _BrokenStore:
    def __init__(self, fail_load=False):
        self.fail_load = fail_load

    def load(self, chat_id):
        if self.fail_load:
            raise StoreError("connection refused")
        return Ledger(chat_id=chat_id)

    def save(self, ledger):
        raise StoreError("disk full")


def test_load_failure_is_reported():
    response = Dispatcher(_BrokenStore(fail_load=True), support_handle="@admin").dispatch(
        CHAT, "/status")
    assert not response.ok
    assert "@admin" in response.text


def test_save_failure_is_reported():
    response = Dispatcher(_BrokenStore()).dispatch(CHAT, "/add @a 10")
    assert not response.ok
    assert response.text.startswith("There seem to be problems with this bot")
    assert "the bot owner" in response.text


def test_read_only_command_does_not_save():
    response = Dispatcher(_BrokenStore()).dispatch(CHAT, "/solve")
    assert response.ok


def test_request_log(tmp_path, store):
    log_path = tmp_path / "requests.log"
    dispatcher = Dispatcher(store, log_path=log_path)
    dispatcher.dispatch(CHAT, "/add @a 10", source="[test]")
    dispatcher.dispatch(CHAT, "/nope", source="[test]")
    lines = log_path.read_text().splitlines()
    assert len(lines) == 4
    assert lines[0].endswith("[test]  /add @a 10")
    assert lines[1].startswith("  -> add.add_item")
    assert lines[3] == "  -> none"


def test_concurrent_adds_are_not_lost(store):
    dispatcher = Dispatcher(store)

    def worker(n):
        for _ in range(20):
            dispatcher.dispatch(CHAT, f"/add @u{n} 1")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(store.load(CHAT).items) == 100


def test_digits_in_handles_are_amounts(dispatcher):
    assert send(dispatcher, "/add @bob1 10").text == "Added a payment of 11.00"


def test_huge_amount_is_refused(dispatcher, store):
    huge = "9" * 30
    response = send(dispatcher, f"/add @alice {huge}")
    assert response.ok
    assert response.text.startswith(f"I cannot parse value {huge} :(")
    assert store.load(CHAT).items == []


def test_corrupt_stored_ledger_is_reported(tmp_path):
    path = tmp_path / "bills.json"
    path.write_text(json.dumps({str(CHAT): {"id": CHAT, "items": [5]}}))
    response = Dispatcher(JsonLedgerStore(path)).dispatch(CHAT, "/status")
    assert not response.ok
    assert response.text.startswith("There seem to be problems with this bot")


def test_chat_locks_are_released(dispatcher):
    send(dispatcher, "/add @a 1", chat_id=1)
    send(dispatcher, "/add @b 2", chat_id=2)
    assert len(dispatcher._locks) == 0


def test_help_explains_refused_words(dispatcher):
    assert "/add @alice ten is refused" in send(dispatcher, "/help").text
