import logging
from datetime import date
from typing import Any, Optional, Tuple, Union

from debt_tracker import transforms
from debt_tracker.domain import Account
from debt_tracker.events import (
    ACCOUNT_CREATED, ACCOUNT_DELETED, BALANCE_RECORDED, CREDENTIAL_SAVED, DATA_RESET,
    EventBus, register_default_handlers,
)
from debt_tracker.functional import Maybe, parse_account_form, parse_balance_form, safe_account
from debt_tracker.storage import API_KEY_KEY, KeyValueStore

logger = logging.getLogger(__name__)


class AppState:
    """Single writable source of truth for accounts and the API key.

    Every successful mutation replaces the account tuple, writes the full list
    back to the store and publishes an event. Declined mutations (bad input,
    unknown account) touch neither the store nor the bus.
    """

    def __init__(self, store: KeyValueStore, accounts: Tuple[Account, ...], bus: Optional[EventBus] = None):
        self.store = store
        self._accounts = tuple(accounts)
        self.bus = bus if bus is not None else register_default_handlers(EventBus())

    @classmethod
    def load(cls, store: KeyValueStore, bus: Optional[EventBus] = None) -> "AppState":
        return cls(store, transforms.load_accounts(store), bus)

    @property
    def accounts(self) -> Tuple[Account, ...]:
        return self._accounts

    def _commit(self, accounts: Tuple[Account, ...], event: str, payload: dict) -> None:
        self._accounts = accounts
        transforms.save_accounts(self.store, accounts)
        self.bus.publish(event, payload)

    def get_account(self, account_id: str) -> Maybe[Account]:
        return safe_account(self._accounts, account_id)

    def create_account(
        self,
        name: Optional[str],
        acc_type: str,
        interest_rate: Any,
        initial_balance: Any,
        on: Union[date, str, None] = None,
    ) -> Optional[Account]:
        parsed = parse_account_form(name, acc_type, interest_rate, initial_balance, on or date.today())
        if parsed.is_left():
            logger.debug("create_account declined: %s", parsed.get_error()["message"])
            return None
        account = transforms.new_account(self._accounts, **parsed.get_or_else({}))
        self._commit(
            transforms.add_account(self._accounts, account),
            ACCOUNT_CREATED,
            {"account_id": account.id, "name": account.name, "type": account.type},
        )
        return account

    def record_balance(self, account_id: str, balance: Any, on: Union[date, str, None] = None) -> bool:
        if self.get_account(account_id).is_none():
            return False
        parsed = parse_balance_form(account_id, balance, on or date.today())
        if parsed.is_left():
            logger.debug("record_balance declined: %s", parsed.get_error()["message"])
            return False
        values = parsed.get_or_else({})
        self._commit(
            transforms.record_balance(self._accounts, values["account_id"], values["balance"], values["on"]),
            BALANCE_RECORDED,
            values,
        )
        return True

    def delete_account(self, account_id: str) -> bool:
        if self.get_account(account_id).is_none():
            return False
        self._commit(
            transforms.delete_account(self._accounts, account_id),
            ACCOUNT_DELETED,
            {"account_id": account_id},
        )
        return True

    def reset_all(self) -> None:
        removed = len(self._accounts)
        self._commit((), DATA_RESET, {"removed": removed})

    @property
    def api_key(self) -> Optional[str]:
        return self.store.get(API_KEY_KEY) or None

    def get_credential(self) -> Optional[str]:
        return self.api_key

    def set_credential(self, value: Optional[str]) -> None:
        value = (value or "").strip()
        if value:
            self.store.set(API_KEY_KEY, value)
        else:
            self.store.remove(API_KEY_KEY)
        self.bus.publish(CREDENTIAL_SAVED, {"configured": bool(value)})
