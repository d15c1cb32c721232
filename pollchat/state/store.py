import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from pollchat.core.enums.routes import NO_SELECTION, Slot
from pollchat.state.models import Contact, Message, UserProfile

Handler = Callable[[Any], None]


class Store:
    """
    Contenedor único del estado de sesión.

    - Lecturas: propiedades que devuelven snapshots inmutables (tuplas).
    - Escrituras: solo por los setters nombrados; cada slot es last-writer-wins
      y las listas se reemplazan enteras (salvo append_message).
    - subscribe(slot, handler): el handler recibe cada escritura del slot,
      en orden y de forma síncrona. Devuelve una función para desuscribirse.
    """

    def __init__(self):
        self._slots: Dict[str, Any] = {
            Slot.USER.value: None,
            Slot.SELECTED.value: NO_SELECTION,
            Slot.MESSAGES.value: (),
            Slot.CONTACTS.value: (),
            Slot.USERS.value: (),
        }
        self._subs: Dict[str, List[Handler]] = {k: [] for k in self._slots}

    #  suscripciones
    def subscribe(self, slot, handler: Handler) -> Callable[[], None]:
        key = self._key(slot)
        self._subs[key].append(handler)

        def unsubscribe():
            try:
                self._subs[key].remove(handler)
            except ValueError:
                pass
        return unsubscribe

    def _key(self, slot) -> str:
        key = slot.value if isinstance(slot, Slot) else str(slot)
        if key not in self._slots:
            raise KeyError(f"Slot desconocido: {slot}")
        return key

    def _write(self, slot: Slot, value: Any):
        key = slot.value
        self._slots[key] = value
        # copia: un handler puede desuscribirse mientras notificamos
        for h in list(self._subs[key]):
            try:
                h(value)
            except Exception:
                # un consumidor caído no debe impedir la entrega al resto
                logging.exception("[Store] Handler error for %s", key)

    def get(self, slot) -> Any:
        return self._slots[self._key(slot)]

    #  lecturas
    @property
    def user(self) -> Optional[UserProfile]:
        return self._slots[Slot.USER.value]

    @property
    def user_id(self) -> Optional[int]:
        u = self.user
        return u.user_id if u else None

    @property
    def selected_contact_id(self) -> int:
        return self._slots[Slot.SELECTED.value]

    @property
    def messages(self) -> Tuple[Message, ...]:
        return self._slots[Slot.MESSAGES.value]

    @property
    def contacts(self) -> Tuple[Contact, ...]:
        return self._slots[Slot.CONTACTS.value]

    @property
    def users(self) -> Tuple[UserProfile, ...]:
        return self._slots[Slot.USERS.value]

    #  escrituras
    def set_user(self, profile: UserProfile):
        self._write(Slot.USER, profile)

    def clear_user(self):
        """Logout: sin UserId no queda nada de la sesión anterior."""
        self._write(Slot.SELECTED, NO_SELECTION)
        self._write(Slot.MESSAGES, ())
        self._write(Slot.CONTACTS, ())
        self._write(Slot.USERS, ())
        self._write(Slot.USER, None)

    def select_contact(self, contact_id: int):
        self._write(Slot.SELECTED, int(contact_id))

    def set_messages(self, messages: Optional[Iterable[Message]]):
        self._write(Slot.MESSAGES, tuple(messages or ()))

    def append_message(self, message: Message):
        self._write(Slot.MESSAGES, self.messages + (message,))

    def set_contacts(self, contacts: Optional[Iterable[Contact]]):
        self._write(Slot.CONTACTS, tuple(contacts or ()))

    def set_users(self, users: Optional[Iterable[UserProfile]]):
        self._write(Slot.USERS, tuple(users or ()))
