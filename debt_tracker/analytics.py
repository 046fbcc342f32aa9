"""Derived views over an account snapshot.

Everything here is a pure function of the accounts passed in; nothing is
cached, so callers recompute on every read.
"""
from collections import defaultdict
from typing import Callable, Dict, Iterable, Iterator, List, Tuple

from debt_tracker.domain import Account, CREDIT_CARD

ALL = "all"

SeriesPoint = Tuple[str, float]
AlignedPoint = Tuple[str, Dict[str, float]]


def by_type(account_type: str) -> Callable[[Account], bool]:
    def _filter(a: Account) -> bool:
        return a.type == account_type

    return _filter


def credit_cards(accounts: Iterable[Account]) -> List[Account]:
    return list(filter(by_type(CREDIT_CARD), accounts))


def other_liabilities(accounts: Iterable[Account]) -> List[Account]:
    is_card = by_type(CREDIT_CARD)
    return [a for a in accounts if not is_card(a)]


def avalanche_order(accounts: Iterable[Account]) -> List[Account]:
    """Credit cards, highest interest rate first; ties keep their input order."""
    return sorted(credit_cards(accounts), key=lambda a: a.interest_rate, reverse=True)


def ranked_avalanche(accounts: Iterable[Account]) -> Iterator[Tuple[int, Account]]:
    return enumerate(avalanche_order(accounts), start=1)


def current_balance(account: Account) -> float:
    return account.history[-1].balance if account.history else 0.0


def starting_balance(account: Account) -> float:
    return account.history[0].balance if account.history else 0.0


def total_liabilities(accounts: Iterable[Account]) -> float:
    return sum((current_balance(a) for a in accounts), 0.0)


def total_credit_card_debt(accounts: Iterable[Account]) -> float:
    return total_liabilities(credit_cards(accounts))


def debt_reduced(accounts: Iterable[Account]) -> float:
    return sum((starting_balance(a) - current_balance(a) for a in accounts), 0.0)


def date_totals(accounts: Iterable[Account]) -> List[SeriesPoint]:
    """Sum every balance entry per calendar day, ascending by date.

    A day only collects the accounts that have an entry on it; nothing is
    carried forward from earlier days.
    """
    totals: Dict[str, float] = defaultdict(float)
    for a in accounts:
        for entry in a.history:
            totals[entry.date] += entry.balance
    return sorted(totals.items(), key=lambda item: item[0])


def aligned_series(accounts: Iterable[Account]) -> List[AlignedPoint]:
    """One sparse ``{account_id: balance}`` row per date seen in any account.

    Accounts without an entry on a date are absent from that row. When an
    account has several entries on the same date the first one in history wins.
    """
    accounts = list(accounts)
    per_account: Dict[str, Dict[str, float]] = {}
    for a in accounts:
        by_date: Dict[str, float] = {}
        for entry in a.history:
            by_date.setdefault(entry.date, entry.balance)
        per_account[a.id] = by_date

    all_dates = sorted({d for by_date in per_account.values() for d in by_date})
    return [
        (d, {acc_id: by_date[d] for acc_id, by_date in per_account.items() if d in by_date})
        for d in all_dates
    ]


def liability_trend(accounts: Iterable[Account], selection: str = ALL) -> List[SeriesPoint]:
    accounts = list(accounts)
    if selection == ALL:
        return date_totals(accounts)
    account = next((a for a in accounts if a.id == selection), None)
    if account is None:
        return []
    return [(e.date, e.balance) for e in account.history]


def credit_card_trend(accounts: Iterable[Account]) -> List[SeriesPoint]:
    return date_totals(credit_cards(accounts))


def credit_card_breakdown(accounts: Iterable[Account]) -> List[AlignedPoint]:
    return aligned_series(credit_cards(accounts))
