from dataclasses import dataclass, field
from typing import Tuple

CREDIT_CARD = "credit_card"
LOAN = "loan"
MORTGAGE = "mortgage"
OTHER = "other"

ACCOUNT_TYPES = (CREDIT_CARD, LOAN, MORTGAGE, OTHER)


@dataclass(frozen=True)
class BalanceEntry:
    date: str        # calendar day, "YYYY-MM-DD"
    balance: float


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    type: str                # one of ACCOUNT_TYPES
    interest_rate: float     # percentage, e.g. 24.99
    history: Tuple[BalanceEntry, ...] = field(default_factory=tuple)

    @property
    def type_label(self) -> str:
        return self.type.replace("_", " ")
