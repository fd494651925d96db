from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import pytest

from helpdesk.core.config import get_settings
from helpdesk.tickets import TicketRepository, TicketService


class FakeClock:
    def __init__(self, start: datetime | None = None, step: timedelta = timedelta(minutes=1)):
        self.current = start or datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + self.step
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "tickets.json"


@pytest.fixture
def repository(store_path) -> TicketRepository:
    return TicketRepository(store_path)


@pytest.fixture
def service(repository, clock) -> TicketService:
    return TicketService.open(repository, clock=clock)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_helpdesk_logging():
    yield
    for name in ("helpdesk", "helpdesk.tickets"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
