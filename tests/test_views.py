import asyncio

from pollchat.core.enums.routes import Route
from pollchat.state.models import Message
from pollchat.views.conversation import ConversationView, MessageRow
from pollchat.views.directory import ContactRow, DirectoryView

from conftest import ALICE, BOB, CAROL


def _m(frm, to, text):
    return Message(frm, to, text, "9:00", True)


# =============================================================================
# ConversationView
# =============================================================================

def test_rows_are_styled_by_direction(store, chat, logged_in):
    view = ConversationView(store, chat)
    store.set_messages([_m(2, 1, "hola"), _m(1, 2, "qué tal")])
    assert view.rows == [
        MessageRow("hola", "9:00", "rx"),
        MessageRow("qué tal", "9:00", "tx"),
    ]


def test_submit_clears_draft_and_sends(store, chat, bridge, logged_in):
    view = ConversationView(store, chat)
    store.select_contact(2)
    view.draft = "hi"
    msg = view.submit()
    assert view.draft == ""
    assert msg is not None and msg.text == "hi"
    assert view.rows[-1] == MessageRow("hi", "9:05", "tx", pending=True)
    assert len(bridge.submitted) == 1


def test_blank_submit_keeps_draft(store, chat, logged_in):
    view = ConversationView(store, chat)
    store.select_contact(2)
    view.draft = "   "
    assert view.submit() is None
    assert view.draft == "   "
    assert store.messages == ()


def test_scroll_only_when_count_grows(store, chat, logged_in):
    hits = []
    view = ConversationView(store, chat, on_scroll=lambda: hits.append(1))
    store.select_contact(2)

    store.set_messages([_m(2, 1, "a")])
    assert view.take_scroll_request() is True
    assert view.take_scroll_request() is False

    # mismo poll, misma longitud: sin salto
    store.set_messages([_m(2, 1, "a")])
    assert view.take_scroll_request() is False

    # sustitución de igual longitud con contenido distinto tampoco
    store.set_messages([_m(2, 1, "b")])
    assert view.take_scroll_request() is False

    chat.send_message("c")
    assert view.take_scroll_request() is True

    # encoger no hace scroll
    store.set_messages([])
    assert view.take_scroll_request() is False

    store.set_messages([_m(2, 1, "a"), _m(2, 1, "b")])
    assert view.take_scroll_request() is True
    assert len(hits) == 3


def test_title_uses_selected_contact(store, chat, logged_in):
    view = ConversationView(store, chat)
    assert view.title == "Messages"
    assert view.has_selection is False
    store.set_contacts([BOB, CAROL])
    store.select_contact(5)
    assert view.title == "Carol Danvers"
    assert view.subtitle == "carol@Example.com"


def test_closed_view_stops_tracking(store, chat, logged_in):
    view = ConversationView(store, chat)
    view.close()
    store.set_messages([_m(2, 1, "a")])
    assert view.take_scroll_request() is False


# =============================================================================
# DirectoryView
# =============================================================================

def test_contact_rows_mark_selection(store, roster, chat, logged_in):
    view = DirectoryView(store, roster, chat)
    store.set_contacts([BOB, CAROL])
    store.select_contact(2)
    assert view.contact_rows == [
        ContactRow(2, "Bob Builder", "bob@example.com", "", True),
        ContactRow(5, "Carol Danvers", "carol@Example.com", "", False),
    ]


def test_search_is_opt_in_and_live(store, roster, chat, logged_in):
    view = DirectoryView(store, roster, chat)
    store.set_users([ALICE, BOB, CAROL])
    view.open_overlay()
    assert view.overlay_visible is True
    assert view.results == []

    view.set_query("CAROL")
    assert view.results == [CAROL]

    view.set_query("")
    assert view.results == []


def test_results_follow_directory_updates(store, roster, chat, logged_in):
    view = DirectoryView(store, roster, chat)
    view.set_query("bob")
    assert view.results == []
    store.set_users([BOB, CAROL])
    assert view.results == [BOB]


def test_close_overlay_clears_query(store, roster, chat, logged_in):
    view = DirectoryView(store, roster, chat)
    store.set_users([BOB])
    view.open_overlay()
    view.set_query("bob")
    view.close_overlay()
    assert view.overlay_visible is False
    assert view.query == "" and view.results == []


def test_pick_contact_selects_conversation(store, roster, chat, scheduler, logged_in):
    view = DirectoryView(store, roster, chat)

    async def scenario():
        view.pick_contact(2)
        scope = scheduler.scope_of("messages")
        chat.stop()
        return scope

    assert asyncio.run(scenario()) == 2
    assert store.selected_contact_id == 2


def test_pick_result_failure_does_not_add_ghost(store, roster, chat, bridge, notices, logged_in):
    view = DirectoryView(store, roster, chat)
    store.set_contacts([BOB])
    bridge.fail(Route.ADD_CONTACT, status=409)
    assert asyncio.run(view.pick_result(5)) is False
    assert store.contacts == (BOB,)
    assert len(notices) == 1
