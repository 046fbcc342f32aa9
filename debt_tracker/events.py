import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = [
    'Event', 'EventBus',
    'ACCOUNT_CREATED', 'BALANCE_RECORDED', 'ACCOUNT_DELETED', 'DATA_RESET', 'CREDENTIAL_SAVED',
    'MUTATION_EVENTS', 'log_mutation_handler', 'register_default_handlers',
]

logger = logging.getLogger(__name__)


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], dict]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[dict]:
        handlers = self._subscribers.get(name, [])
        if not handlers:
            return []
        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        return [handler(event, payload) for handler in list(handlers)]


ACCOUNT_CREATED = "ACCOUNT_CREATED"
BALANCE_RECORDED = "BALANCE_RECORDED"
ACCOUNT_DELETED = "ACCOUNT_DELETED"
DATA_RESET = "DATA_RESET"
CREDENTIAL_SAVED = "CREDENTIAL_SAVED"

MUTATION_EVENTS = (ACCOUNT_CREATED, BALANCE_RECORDED, ACCOUNT_DELETED, DATA_RESET, CREDENTIAL_SAVED)


def log_mutation_handler(event: Event, payload: dict) -> dict:
    # never log the key itself
    safe = {k: v for k, v in payload.items() if k != "api_key"}
    logger.debug("%s %s", event.name, safe)
    return {"logged": event.name}


def register_default_handlers(bus: EventBus) -> EventBus:
    for name in MUTATION_EVENTS:
        bus.subscribe(name, log_mutation_handler)
    return bus
