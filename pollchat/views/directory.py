from dataclasses import dataclass
from typing import Awaitable, List

from pollchat.core.enums.routes import Slot
from pollchat.services.chat import ChatService
from pollchat.services.roster import RosterService, filter_users
from pollchat.state.models import UserProfile
from pollchat.state.store import Store


@dataclass(frozen=True)
class ContactRow:
    user_id: int
    name: str
    email: str
    descr: str = ""
    selected: bool = False


class DirectoryView:
    """
    Lista de contactos + overlay "añadir contacto" con búsqueda en vivo.
    Los resultados se recalculan en cada tecla y cada vez que el directorio
    de usuarios cambia en el Store.
    """

    def __init__(self, store: Store, roster: RosterService, chat: ChatService):
        self.store = store
        self.roster = roster
        self.chat = chat
        self.overlay_visible = False
        self.query = ""
        self.results: List[UserProfile] = []
        self._unsubscribe = store.subscribe(Slot.USERS, self._on_users)

    def _on_users(self, users):
        self.results = filter_users(users, self.query)

    @property
    def contact_rows(self) -> List[ContactRow]:
        sel = self.store.selected_contact_id
        return [
            ContactRow(
                user_id=c.user_id,
                name=c.display_name,
                email=c.email,
                descr=c.descr,
                selected=(c.user_id == sel),
            )
            for c in self.store.contacts
        ]

    #  overlay
    def open_overlay(self):
        self.overlay_visible = True

    def close_overlay(self):
        self.overlay_visible = False
        self.set_query("")

    def set_query(self, query: str):
        self.query = query or ""
        self.results = filter_users(self.store.users, self.query)

    #  acciones
    def pick_contact(self, user_id: int):
        self.chat.select(user_id)

    def pick_result(self, user_id: int) -> Awaitable[bool]:
        """Devuelve la corrutina de add_contact; quien llama la agenda."""
        return self.roster.add_contact(user_id)

    def close(self):
        self._unsubscribe()
