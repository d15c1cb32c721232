import asyncio

from pollchat.core.enums.routes import Route
from pollchat.services.auth import MSG_LOGIN_ERROR, MSG_REGISTER_ERROR, MSG_REGISTER_OK

from conftest import ALICE


def test_login_sets_current_user(auth, bridge, store):
    bridge.reply(Route.LOGIN, ALICE.to_json())
    profile = asyncio.run(auth.login("alice@example.com", "secret"))
    assert profile == ALICE
    assert store.user == ALICE
    assert bridge.calls_to(Route.LOGIN) == [{"Email": "alice@example.com", "Password": "secret"}]


def test_login_failure_alerts_and_stays_logged_out(auth, bridge, notices, store):
    bridge.fail(Route.LOGIN, status=400)
    assert asyncio.run(auth.login("alice@example.com", "bad")) is None
    assert store.user is None
    assert notices.pending() == [MSG_LOGIN_ERROR]


def test_login_without_user_id_is_a_failure(auth, bridge, notices, store):
    bridge.reply(Route.LOGIN, {})
    assert asyncio.run(auth.login("alice@example.com", "x")) is None
    assert store.user is None
    assert len(notices) == 1


def test_register_creates_and_logs_in(auth, bridge, notices, store):
    bridge.reply(Route.REGISTER, ALICE.to_json())
    profile = asyncio.run(auth.register("alice@example.com", "pw", "Alice", "Liddell", "tester"))
    assert profile == ALICE
    assert store.user == ALICE
    assert notices.pending() == [MSG_REGISTER_OK]
    assert bridge.calls_to(Route.REGISTER) == [{
        "Email": "alice@example.com",
        "Password": "pw",
        "Firstname": "Alice",
        "Lastname": "Liddell",
        "Descr": "tester",
    }]


def test_register_failure(auth, bridge, notices, store):
    bridge.fail(Route.REGISTER, status=409)
    assert asyncio.run(auth.register("a@b.c", "pw", "A", "B")) is None
    assert store.user is None
    assert notices.pending() == [MSG_REGISTER_ERROR]


def test_logout_clears_session(auth, store, logged_in):
    store.select_contact(2)
    auth.logout()
    assert store.user is None
    assert store.selected_contact_id == -1


def test_logout_when_logged_out_is_noop(auth, store):
    seen = []
    store.subscribe("user", seen.append)
    auth.logout()
    assert seen == []
