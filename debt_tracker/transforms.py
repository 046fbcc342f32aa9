import json
import logging
import secrets
import string
from datetime import date, datetime
from typing import Iterable, Tuple, Union

from debt_tracker.domain import ACCOUNT_TYPES, Account, BalanceEntry, CREDIT_CARD, LOAN
from debt_tracker.storage import ACCOUNTS_KEY, KeyValueStore

logger = logging.getLogger(__name__)

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9

SEED_ACCOUNTS: Tuple[Account, ...] = (
    Account(
        id="1",
        name="Chase Sapphire",
        type=CREDIT_CARD,
        interest_rate=24.99,
        history=(
            BalanceEntry("2023-01-01", 5000.0),
            BalanceEntry("2023-02-01", 4800.0),
            BalanceEntry("2023-03-01", 4500.0),
        ),
    ),
    Account(
        id="2",
        name="Auto Loan",
        type=LOAN,
        interest_rate=5.4,
        history=(
            BalanceEntry("2023-01-01", 25000.0),
            BalanceEntry("2023-02-01", 24600.0),
            BalanceEntry("2023-03-01", 24200.0),
        ),
    ),
)


def to_iso_date(value: Union[date, datetime, str]) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def sort_history(history: Iterable[BalanceEntry]) -> Tuple[BalanceEntry, ...]:
    # sorted() is stable: entries sharing a date keep their append order
    return tuple(sorted(history, key=lambda e: e.date))


# --- serialization

def account_to_dict(a: Account) -> dict:
    return {
        "id": a.id,
        "name": a.name,
        "type": a.type,
        "interestRate": a.interest_rate,
        "history": [{"date": e.date, "balance": e.balance} for e in a.history],
    }


def account_from_dict(d: dict) -> Account:
    """Build an Account from its stored form, raising on anything malformed."""
    acc_type = d["type"]
    if acc_type not in ACCOUNT_TYPES:
        raise ValueError(f"unknown account type: {acc_type!r}")
    history = tuple(
        BalanceEntry(date=str(h["date"]), balance=float(h["balance"]))
        for h in d["history"]
    )
    return Account(
        id=str(d["id"]),
        name=str(d["name"]),
        type=acc_type,
        interest_rate=float(d["interestRate"]),
        history=sort_history(history),
    )


def dumps_accounts(accounts: Iterable[Account]) -> str:
    return json.dumps([account_to_dict(a) for a in accounts])


def loads_accounts(text: str) -> Tuple[Account, ...]:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("stored accounts must be a JSON array")
    return tuple(account_from_dict(a) for a in data)


def load_accounts(store: KeyValueStore) -> Tuple[Account, ...]:
    raw = store.get(ACCOUNTS_KEY)
    if raw is None:
        logger.info("no saved accounts, starting from the seed data")
        return SEED_ACCOUNTS
    try:
        return loads_accounts(raw)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("saved accounts are unreadable (%s), starting from the seed data", e)
        return SEED_ACCOUNTS


def save_accounts(store: KeyValueStore, accounts: Iterable[Account]) -> None:
    store.set(ACCOUNTS_KEY, dumps_accounts(accounts))


# --- pure updates, each returns a new tuple

def new_account_id(taken: Iterable[str] = ()) -> str:
    taken = set(taken)
    while True:
        candidate = "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
        if candidate not in taken:
            return candidate


def new_account(
    accounts: Tuple[Account, ...],
    name: str,
    acc_type: str,
    interest_rate: float,
    initial_balance: float,
    on: Union[date, str],
) -> Account:
    return Account(
        id=new_account_id(a.id for a in accounts),
        name=name,
        type=acc_type,
        interest_rate=interest_rate,
        history=(BalanceEntry(to_iso_date(on), initial_balance),),
    )


def add_account(accounts: Tuple[Account, ...], account: Account) -> Tuple[Account, ...]:
    return accounts + (account,)


def delete_account(accounts: Tuple[Account, ...], account_id: str) -> Tuple[Account, ...]:
    return tuple(a for a in accounts if a.id != account_id)


def record_balance(
    accounts: Tuple[Account, ...], account_id: str, balance: float, on: Union[date, str]
) -> Tuple[Account, ...]:
    entry = BalanceEntry(to_iso_date(on), balance)
    return tuple(
        Account(
            id=a.id,
            name=a.name,
            type=a.type,
            interest_rate=a.interest_rate,
            history=sort_history(a.history + (entry,)) if a.id == account_id else a.history,
        )
        for a in accounts
    )
