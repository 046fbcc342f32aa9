import math
import re
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Callable, Generic, Optional, TypeVar, Union

from debt_tracker.domain import ACCOUNT_TYPES, Account
from debt_tracker.transforms import to_iso_date

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

THOUSANDS_RE = re.compile(r"^[+-]?\d{1,3}(,\d{3})+(\.\d*)?$")


class Maybe(Generic[T], ABC):

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_some(self) -> bool:
        pass

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_some(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def get_or_else(self, default: T) -> T:
        return default

    def is_some(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "Nothing()"

    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):

    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass

    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass

    @abstractmethod
    def is_right(self) -> bool:
        pass

    def is_left(self) -> bool:
        return not self.is_right()

    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def is_right(self) -> bool:
        return True

    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def is_right(self) -> bool:
        return False

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def _invalid(field: str, message: str) -> Left:
    return Left({"error": "invalid_input", "field": field, "message": message})


def safe_account(accs: tuple[Account, ...], account_id: str) -> Maybe[Account]:
    for acc in accs:
        if acc.id == account_id:
            return Some(acc)
    return Nothing()


def parse_amount(field: str, raw: Any) -> Either[dict, float]:
    """Accept ints, floats and numeric strings; reject blanks, NaN and infinities.

    Commas are only accepted as thousands separators ("1,250.50"); a decimal
    comma such as "1,5" is rejected rather than read as 15.
    """
    if raw is None or isinstance(raw, bool):
        return _invalid(field, f"{field} is required")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return _invalid(field, f"{field} is required")
        if "," in raw:
            if not THOUSANDS_RE.match(raw):
                return _invalid(field, f"{field} must use '.' for decimals and ',' only between thousands")
            raw = raw.replace(",", "")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return _invalid(field, f"{field} must be a number")
    if not math.isfinite(value):
        return _invalid(field, f"{field} must be a finite number")
    return Right(value)


def parse_date(raw: Union[date, str, None]) -> Either[dict, str]:
    if raw is None:
        return _invalid("date", "date is required")
    iso = to_iso_date(raw)
    try:
        date.fromisoformat(iso)
    except ValueError:
        return _invalid("date", f"date must look like YYYY-MM-DD, got {iso!r}")
    return Right(iso)


def parse_account_form(
    name: Optional[str],
    acc_type: str,
    rate: Any,
    balance: Any,
    on: Union[date, str, None],
) -> Either[dict, dict]:
    """Validate the add-account form.

    Returns ``Right`` with keyword arguments for ``transforms.new_account``
    (minus the account tuple) or ``Left`` describing the first bad field.
    """
    clean_name = (name or "").strip()
    if not clean_name:
        return _invalid("name", "name is required")
    if acc_type not in ACCOUNT_TYPES:
        return _invalid("type", f"type must be one of {', '.join(ACCOUNT_TYPES)}")

    def with_rate(r: float) -> Either[dict, dict]:
        if r < 0:
            return _invalid("interest_rate", "interest_rate cannot be negative")
        return parse_amount("initial_balance", balance).bind(
            lambda b: parse_date(on).bind(
                lambda d: Right({
                    "name": clean_name,
                    "acc_type": acc_type,
                    "interest_rate": r,
                    "initial_balance": b,
                    "on": d,
                })
            )
        )

    return parse_amount("interest_rate", rate).bind(with_rate)


def parse_balance_form(account_id: str, balance: Any, on: Union[date, str, None]) -> Either[dict, dict]:
    return parse_amount("balance", balance).bind(
        lambda b: parse_date(on).bind(
            lambda d: Right({"account_id": account_id, "balance": b, "on": d})
        )
    )
