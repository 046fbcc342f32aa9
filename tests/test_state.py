from debt_tracker.analytics import avalanche_order, current_balance, total_liabilities
from debt_tracker.domain import CREDIT_CARD, MORTGAGE
from debt_tracker.events import (
    ACCOUNT_CREATED, ACCOUNT_DELETED, BALANCE_RECORDED, DATA_RESET, EventBus, MUTATION_EVENTS,
)
from debt_tracker.state import AppState
from debt_tracker.storage import ACCOUNTS_KEY, API_KEY_KEY, JsonFileStore, MemoryStore
from debt_tracker.transforms import SEED_ACCOUNTS, load_accounts


def make_state(store=None):
    bus = EventBus()
    published = []
    for name in MUTATION_EVENTS:
        bus.subscribe(name, lambda event, payload: published.append(event.name) or {})
    return AppState.load(store or MemoryStore(), bus), published


def test_load_starts_from_seed():
    state, _ = make_state()

    assert state.accounts == SEED_ACCOUNTS


def test_create_account_writes_through():
    store = MemoryStore()
    state, published = make_state(store)
    acc = state.create_account("Home", MORTGAGE, "3.25", "310000", "2024-06-01")

    assert acc is not None
    assert state.accounts[-1] == acc
    assert load_accounts(store) == state.accounts
    assert published == [ACCOUNT_CREATED]
    assert total_liabilities(state.accounts) == 28700 + 310000


def test_create_account_with_bad_input_is_a_no_op():
    store = MemoryStore()
    state, published = make_state(store)

    assert state.create_account("", CREDIT_CARD, "10", "100") is None
    assert state.create_account("Visa", CREDIT_CARD, "ten", "100") is None
    assert state.create_account("Visa", CREDIT_CARD, "10", None) is None
    assert state.accounts == SEED_ACCOUNTS
    assert store.get(ACCOUNTS_KEY) is None
    assert published == []


def test_create_account_defaults_to_today():
    state, _ = make_state()
    acc = state.create_account("Visa", CREDIT_CARD, 10, 100)

    assert len(acc.history) == 1
    assert len(acc.history[0].date) == 10


def test_record_balance_backdated():
    state, published = make_state()

    assert state.record_balance("1", "4900", "2023-01-15") is True
    card = state.get_account("1").get_or_else(None)
    assert [e.date for e in card.history] == ["2023-01-01", "2023-01-15", "2023-02-01", "2023-03-01"]
    assert current_balance(card) == 4500
    assert published == [BALANCE_RECORDED]


def test_record_balance_unknown_or_bad_input():
    store = MemoryStore()
    state, published = make_state(store)

    assert state.record_balance("missing", "10", "2024-01-01") is False
    assert state.record_balance("1", "", "2024-01-01") is False
    assert state.record_balance("1", "10", "not-a-date") is False
    assert store.get(ACCOUNTS_KEY) is None
    assert published == []


def test_delete_account():
    store = MemoryStore()
    state, published = make_state(store)

    assert state.delete_account("1") is True
    assert avalanche_order(state.accounts) == []
    assert total_liabilities(state.accounts) == 24200
    assert state.delete_account("1") is False
    assert published == [ACCOUNT_DELETED]
    assert [a.id for a in load_accounts(store)] == ["2"]


def test_reset_all_keeps_credential(tmp_path):
    store = JsonFileStore(tmp_path / "store.json")
    state, published = make_state(store)
    state.set_credential("  my-key ")
    state.reset_all()

    assert state.accounts == ()
    assert DATA_RESET in published

    reloaded = AppState.load(JsonFileStore(tmp_path / "store.json"))
    assert reloaded.accounts == ()
    assert reloaded.get_credential() == "my-key"


def test_clearing_credential_removes_key():
    store = MemoryStore()
    state, _ = make_state(store)
    state.set_credential("abc")
    state.set_credential("")

    assert state.api_key is None
    assert store.get(API_KEY_KEY) is None


def test_state_survives_reload(tmp_path):
    path = tmp_path / "store.json"
    state, _ = make_state(JsonFileStore(path))
    acc = state.create_account("Visa", CREDIT_CARD, "19.99", "800", "2024-02-01")
    state.record_balance(acc.id, "750", "2024-03-01")

    reloaded = AppState.load(JsonFileStore(path))
    assert reloaded.accounts == state.accounts
