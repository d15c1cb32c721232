import asyncio
from datetime import datetime

from pollchat.core.enums.routes import NO_SELECTION, Route
from pollchat.services.chat import MESSAGES, MSG_MESSAGES_ERROR, format_timestamp
from pollchat.state.models import Message


def _msg_json(frm, to, text, ts="9:00"):
    return {"From": frm, "To": to, "Message": text, "Timestamp": ts, "Acked": 1}


# =============================================================================
# send_message (optimistic)
# =============================================================================

def test_send_message_end_to_end(chat, bridge, logged_in):
    logged_in.select_contact(2)
    msg = chat.send_message("hi")

    assert msg == Message(sender=1, recipient=2, text="hi", timestamp="9:05", acked=True)
    assert msg.pending is True
    assert logged_in.messages == (msg,)
    assert bridge.submitted == [
        ("/incoming", {"From": 1, "To": 2, "Message": "hi", "Timestamp": "9:05", "Acked": 1})
    ]


def test_send_grows_list_by_exactly_one_synchronously(chat, logged_in):
    logged_in.select_contact(2)
    logged_in.set_messages([Message(2, 1, "hey", "9:00", True)])
    before = len(logged_in.messages)
    chat.send_message("hello back")
    assert len(logged_in.messages) == before + 1


def test_send_ignored_without_selection_or_text(chat, bridge, logged_in):
    assert chat.send_message("hi") is None
    logged_in.select_contact(2)
    assert chat.send_message("   ") is None
    assert logged_in.messages == ()
    assert bridge.submitted == []


def test_send_ignored_when_logged_out(chat, store, bridge):
    store.select_contact(2)
    assert chat.send_message("hi") is None
    assert bridge.submitted == []


def test_timestamp_hour_not_padded_minutes_padded():
    assert format_timestamp(datetime(2024, 1, 1, 9, 5)) == "9:05"
    assert format_timestamp(datetime(2024, 1, 1, 14, 30)) == "14:30"
    assert format_timestamp(datetime(2024, 1, 1, 0, 0)) == "0:00"


# =============================================================================
# refresh_messages (replace-on-fetch)
# =============================================================================

def test_fetch_supersedes_optimistic_entries(chat, bridge, logged_in):
    logged_in.select_contact(2)
    chat.send_message("hi")
    bridge.reply(Route.MESSAGES, [_msg_json(1, 2, "hi", "9:05")])

    asyncio.run(chat.refresh_messages())

    assert len(logged_in.messages) == 1
    assert logged_in.messages[0].pending is False
    assert bridge.calls_to(Route.MESSAGES) == [{"UserId": 1, "ContactId": 2}]


def test_fetch_null_clears_list(chat, bridge, logged_in):
    logged_in.select_contact(2)
    logged_in.set_messages([Message(2, 1, "old")])
    bridge.reply(Route.MESSAGES, None)
    asyncio.run(chat.refresh_messages())
    assert logged_in.messages == ()


def test_fetch_failure_keeps_messages_and_alerts(chat, bridge, notices, logged_in):
    logged_in.select_contact(2)
    kept = (Message(2, 1, "old"),)
    logged_in.set_messages(kept)
    bridge.fail(Route.MESSAGES)
    asyncio.run(chat.refresh_messages())
    assert logged_in.messages == kept
    assert notices.pending() == [MSG_MESSAGES_ERROR]


def test_refresh_is_noop_without_selection(chat, bridge, logged_in):
    assert logged_in.selected_contact_id == NO_SELECTION
    asyncio.run(chat.refresh_messages())
    assert bridge.calls == []


# =============================================================================
# conversation switching
# =============================================================================

def test_select_restarts_poller_on_new_pair(chat, bridge, scheduler, logged_in):
    bridge.reply(Route.MESSAGES, [])

    async def scenario():
        chat.select(2)
        first = scheduler.scope_of(MESSAGES)
        await asyncio.sleep(0.03)
        chat.select(5)
        second = scheduler.scope_of(MESSAGES)
        # deja correr un tick de 2 que ya estuviera disparado antes del cambio
        await asyncio.sleep(0)
        calls_for_2 = len([b for b in bridge.calls_to(Route.MESSAGES) if b["ContactId"] == 2])
        await asyncio.sleep(0.03)
        chat.stop()
        return first, second, calls_for_2

    first, second, calls_for_2 = asyncio.run(scenario())
    assert (first, second) == (2, 5)
    bodies = bridge.calls_to(Route.MESSAGES)
    # nada nuevo para la conversación anterior tras el cambio
    assert len([b for b in bodies if b["ContactId"] == 2]) == calls_for_2
    assert any(b["ContactId"] == 5 for b in bodies)
    assert logged_in.selected_contact_id == 5


def test_select_clears_previous_conversation(chat, logged_in):
    async def scenario():
        chat.select(2)
        chat.send_message("for bob")
        chat.select(5)
        chat.stop()

    asyncio.run(scenario())
    assert logged_in.messages == ()


def test_select_same_contact_is_noop(chat, scheduler, logged_in):
    async def scenario():
        chat.select(2)
        task = scheduler.get(MESSAGES)
        chat.send_message("keep me")
        chat.select(2)
        same = scheduler.get(MESSAGES) is task
        chat.stop()
        return same

    assert asyncio.run(scenario()) is True
    assert len(logged_in.messages) == 1


def test_late_response_for_previous_conversation_is_discarded(chat, bridge, logged_in):
    bridge.reply(Route.MESSAGES, [_msg_json(2, 1, "for A")])
    bridge.hold(Route.MESSAGES)

    async def scenario():
        logged_in.select_contact(2)
        pending = asyncio.ensure_future(chat.refresh_messages(2))
        await asyncio.sleep(0)
        # cambio de conversación mientras la petición de A está en vuelo
        logged_in.select_contact(5)
        logged_in.set_messages(())
        bridge.release(Route.MESSAGES)
        await pending

    asyncio.run(scenario())
    assert logged_in.messages == ()


def test_select_requires_session(chat, store, scheduler):
    chat.select(2)
    assert store.selected_contact_id == NO_SELECTION
    assert not scheduler.is_running(MESSAGES)


def test_late_failure_for_previous_conversation_is_not_alerted(chat, bridge, notices, logged_in):
    bridge.fail(Route.MESSAGES)
    bridge.hold(Route.MESSAGES)

    async def scenario():
        logged_in.select_contact(2)
        pending = asyncio.ensure_future(chat.refresh_messages(2))
        await asyncio.sleep(0)
        logged_in.select_contact(5)
        bridge.release(Route.MESSAGES)
        await pending

    asyncio.run(scenario())
    assert notices.pending() == []


def test_late_failure_after_logout_is_not_alerted(chat, bridge, notices, logged_in):
    bridge.fail(Route.MESSAGES)
    bridge.hold(Route.MESSAGES)

    async def scenario():
        logged_in.select_contact(2)
        pending = asyncio.ensure_future(chat.refresh_messages())
        await asyncio.sleep(0)
        logged_in.clear_user()
        bridge.release(Route.MESSAGES)
        await pending

    asyncio.run(scenario())
    assert notices.pending() == []
