import logging
from dataclasses import dataclass
from typing import Iterable, List

from pollchat.core.config import DEFAULT_POLL_INTERVAL
from pollchat.core.enums.routes import Route
from pollchat.core.scheduler import PollScheduler
from pollchat.services.http_bridge import BackendError, HttpBridge
from pollchat.services.notices import NoticeBoard
from pollchat.state.models import UserProfile, parse_profiles
from pollchat.state.store import Store

DIRECTORY = "directory"
CONTACTS = "contacts"

MSG_DIRECTORY_ERROR = "Error getting users. Please try again later"
MSG_CONTACTS_ERROR = "Error getting contacts. Please try again later"
MSG_ADD_ERROR = "Error adding contact. It may already be in your list"


def filter_users(users: Iterable[UserProfile], query: str) -> List[UserProfile]:
    """
    Subsecuencia de `users` cuyo nombre+apellido+email contiene `query`,
    sin distinguir mayúsculas. Query vacía -> [] (la búsqueda es opt-in).
    """
    if not query:
        return []
    q = query.lower()
    return [u for u in users if q in f"{u.firstname}{u.lastname}{u.email}".lower()]


@dataclass
class RosterService:
    bridge: HttpBridge
    store: Store
    notices: NoticeBoard
    scheduler: PollScheduler
    interval: float = DEFAULT_POLL_INTERVAL

    #  refrescos
    async def refresh_directory(self):
        uid = self.store.user_id
        if uid is None:
            return
        try:
            payload = await self.bridge.post(Route.ALL_USERS, {"UserId": uid})
        except BackendError as e:
            if self.store.user_id != uid:
                logging.debug("[Roster] Fallo del directorio ignorado: la sesión cambió")
                return
            logging.warning("[Roster] refresh_directory falló: %s", e)
            self.notices.alert(MSG_DIRECTORY_ERROR)
            return
        if self.store.user_id != uid:
            logging.debug("[Roster] Directorio descartado: la sesión cambió")
            return
        self.store.set_users(parse_profiles(payload))

    async def refresh_contacts(self):
        uid = self.store.user_id
        if uid is None:
            return
        try:
            payload = await self.bridge.post(Route.CONTACTS, {"UserId": uid})
        except BackendError as e:
            if self.store.user_id != uid:
                logging.debug("[Roster] Fallo de contactos ignorado: la sesión cambió")
                return
            logging.warning("[Roster] refresh_contacts falló: %s", e)
            self.notices.alert(MSG_CONTACTS_ERROR)
            return
        if self.store.user_id != uid:
            logging.debug("[Roster] Contactos descartados: la sesión cambió")
            return
        self.store.set_contacts(parse_profiles(payload))

    #  comandos
    async def add_contact(self, contact_id: int) -> bool:
        """
        Solo confirma con el servidor: a diferencia de los mensajes, aquí no
        hay inserción optimista. Si va bien se refresca la lista de contactos.
        """
        uid = self.store.user_id
        if uid is None:
            return False
        body = {"UserId": uid, "ContactId": int(contact_id)}
        try:
            await self.bridge.post(Route.ADD_CONTACT, body)
        except BackendError as e:
            logging.warning("[Roster] add_contact(%s) falló: %s", contact_id, e)
            self.notices.alert(MSG_ADD_ERROR)
            return False
        logging.info("[Roster] Contacto %s añadido", contact_id)
        await self.refresh_contacts()
        return True

    #  polling
    def start_polling(self):
        uid = self.store.user_id
        if uid is None:
            return
        self.scheduler.start(DIRECTORY, uid, self.refresh_directory, self.interval)
        self.scheduler.start(CONTACTS, uid, self.refresh_contacts, self.interval)

    def stop_polling(self):
        self.scheduler.stop(DIRECTORY)
        self.scheduler.stop(CONTACTS)
