from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from pollchat.core.enums.routes import NO_SELECTION, Slot
from pollchat.services.chat import ChatService
from pollchat.state.models import Message
from pollchat.state.store import Store


@dataclass(frozen=True)
class MessageRow:
    text: str
    time: str
    side: str   # 'tx' (propio) o 'rx'
    pending: bool = False


def build_rows(messages: Sequence[Message], user_id: Optional[int]) -> List[MessageRow]:
    return [
        MessageRow(
            text=m.text,
            time=m.timestamp,
            side="tx" if m.sender == user_id else "rx",
            pending=m.pending,
        )
        for m in messages
    ]


class ConversationView:
    """
    Derivación de la conversación seleccionada a partir del Store.
    Sin red: enviar pasa por ChatService.

    Auto-scroll: se pide solo cuando el número de mensajes crece respecto al
    estado anterior del Store. Un reemplazo de igual longitud (un poll que
    devuelve lo mismo) no mueve el scroll.
    """

    def __init__(self, store: Store, chat: ChatService,
                 on_scroll: Optional[Callable[[], None]] = None):
        self.store = store
        self.chat = chat
        self.on_scroll = on_scroll
        self.draft = ""
        self._last_count = len(store.messages)
        self._scroll_requested = False
        self._unsubscribe = store.subscribe(Slot.MESSAGES, self._on_messages)

    def _on_messages(self, messages):
        count = len(messages)
        grew = count > self._last_count
        self._last_count = count
        if grew:
            self._scroll_requested = True
            if self.on_scroll:
                self.on_scroll()

    @property
    def rows(self) -> List[MessageRow]:
        return build_rows(self.store.messages, self.store.user_id)

    @property
    def has_selection(self) -> bool:
        return self.store.selected_contact_id != NO_SELECTION

    @property
    def title(self) -> str:
        c = self._selected_contact()
        if c is not None:
            return c.display_name or c.email
        return "Messages"

    @property
    def subtitle(self) -> str:
        c = self._selected_contact()
        return c.email if c is not None else ""

    def _selected_contact(self):
        sel = self.store.selected_contact_id
        for c in self.store.contacts:
            if c.user_id == sel:
                return c
        return None

    def take_scroll_request(self) -> bool:
        out = self._scroll_requested
        self._scroll_requested = False
        return out

    def submit(self) -> Optional[Message]:
        text = self.draft
        if not text.strip():
            return None
        # el input se vacía en el mismo paso que el envío
        self.draft = ""
        return self.chat.send_message(text)

    def close(self):
        self._unsubscribe()
