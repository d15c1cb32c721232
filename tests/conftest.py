# tests/conftest.py
import asyncio
from datetime import datetime

import pytest

from pollchat.core.enums.routes import Route
from pollchat.core.scheduler import PollScheduler
from pollchat.services.auth import AuthService
from pollchat.services.chat import ChatService
from pollchat.services.http_bridge import BackendError
from pollchat.services.notices import NoticeBoard
from pollchat.services.roster import RosterService
from pollchat.state.models import UserProfile
from pollchat.state.store import Store


def _path(route) -> str:
    return route.value if isinstance(route, Route) else str(route)


class FakeBridge:
    """
    Backend en memoria con la misma interfaz que HttpBridge.
    - reply(route, *values): respuestas en orden; la última se repite.
      Un BackendError en la lista se lanza en vez de devolverse.
    - hold(route): la siguiente petición a esa ruta espera a release(route).
    """

    def __init__(self):
        self.calls = []
        self.submitted = []
        self._replies = {}
        self._gates = {}

    def reply(self, route, *values):
        self._replies[_path(route)] = list(values)

    def fail(self, route, status=500):
        self.reply(route, BackendError(_path(route), status=status))

    def hold(self, route):
        self._gates[_path(route)] = asyncio.Event()

    def release(self, route):
        self._gates.pop(_path(route)).set()

    def calls_to(self, route):
        return [body for path, body in self.calls if path == _path(route)]

    async def start(self):
        pass

    async def stop(self):
        pass

    async def post(self, route, body):
        path = _path(route)
        self.calls.append((path, body))
        gate = self._gates.get(path)
        if gate is not None:
            await gate.wait()
        values = self._replies.get(path, [None])
        value = values.pop(0) if len(values) > 1 else values[0]
        if isinstance(value, BaseException):
            raise value
        return value

    def submit(self, route, body):
        self.submitted.append((_path(route), body))
        return None


ALICE = UserProfile(user_id=1, email="alice@example.com", firstname="Alice", lastname="Liddell", descr="tester")
BOB = UserProfile(user_id=2, email="bob@example.com", firstname="Bob", lastname="Builder")
CAROL = UserProfile(user_id=5, email="carol@Example.com", firstname="Carol", lastname="Danvers")


def fixed_clock(hour=9, minute=5):
    return lambda: datetime(2024, 1, 1, hour, minute)


@pytest.fixture()
def store():
    return Store()

@pytest.fixture()
def notices():
    return NoticeBoard()

@pytest.fixture()
def bridge():
    return FakeBridge()

@pytest.fixture()
def scheduler():
    return PollScheduler()

@pytest.fixture()
def roster(bridge, store, notices, scheduler):
    return RosterService(bridge, store, notices, scheduler, interval=0.01)

@pytest.fixture()
def chat(bridge, store, notices, scheduler):
    return ChatService(bridge, store, notices, scheduler, interval=0.01, clock=fixed_clock())

@pytest.fixture()
def auth(bridge, store, notices):
    return AuthService(bridge, store, notices)

@pytest.fixture()
def logged_in(store):
    store.set_user(ALICE)
    return store
