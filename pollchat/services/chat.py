import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from pollchat.core.config import DEFAULT_POLL_INTERVAL
from pollchat.core.enums.routes import NO_SELECTION, Route
from pollchat.core.scheduler import PollScheduler
from pollchat.services.http_bridge import BackendError, HttpBridge
from pollchat.services.notices import NoticeBoard
from pollchat.state.models import Message, parse_messages
from pollchat.state.store import Store

MESSAGES = "messages"

MSG_MESSAGES_ERROR = "Error getting messages"


def format_timestamp(now: datetime) -> str:
    # "9:05", "14:30": hora sin relleno, minutos a dos cifras
    return f"{now.hour}:{now.minute:02d}"


@dataclass
class ChatService:
    bridge: HttpBridge
    store: Store
    notices: NoticeBoard
    scheduler: PollScheduler
    interval: float = DEFAULT_POLL_INTERVAL
    clock: Callable[[], datetime] = field(default=datetime.now)

    #  polling de la conversación
    async def refresh_messages(self, contact_id: Optional[int] = None):
        """
        Reemplaza la lista de mensajes con la del servidor (estado autoritativo,
        pisa también los ecos optimistas). La respuesta se descarta si al
        llegar ya no coincide la conversación seleccionada o el usuario.
        """
        if contact_id is None:
            contact_id = self.store.selected_contact_id
        uid = self.store.user_id
        if contact_id == NO_SELECTION or uid is None:
            return
        try:
            payload = await self.bridge.post(Route.MESSAGES, {"UserId": uid, "ContactId": contact_id})
        except BackendError as e:
            if self._stale(contact_id, uid):
                logging.debug("[Chat] Fallo tardío para %s ignorado: %s", contact_id, e)
                return
            logging.warning("[Chat] refresh_messages(%s) falló: %s", contact_id, e)
            self.notices.alert(MSG_MESSAGES_ERROR)
            return
        if self._stale(contact_id, uid):
            logging.debug("[Chat] Respuesta tardía para %s descartada", contact_id)
            return
        self.store.set_messages(parse_messages(payload))

    def _stale(self, contact_id: int, uid: int) -> bool:
        return self.store.selected_contact_id != contact_id or self.store.user_id != uid

    def select(self, contact_id: int):
        contact_id = int(contact_id)
        if contact_id == self.store.selected_contact_id:
            return
        if self.store.user_id is None:
            logging.debug("[Chat] select(%s) ignorado: sin sesión", contact_id)
            return
        self.store.select_contact(contact_id)
        # nada de la conversación anterior puede verse con la nueva
        self.store.set_messages(())
        self.scheduler.start(MESSAGES, contact_id,
                             lambda: self.refresh_messages(contact_id), self.interval)

    def stop(self):
        self.scheduler.stop(MESSAGES)

    #  envío 1-a-1
    def send_message(self, text: str) -> Optional[Message]:
        uid = self.store.user_id
        to = self.store.selected_contact_id
        if not text or not text.strip():
            return None
        if uid is None or to == NO_SELECTION:
            logging.debug("[Chat] send_message ignorado: sin conversación")
            return None

        msg = Message(
            sender=uid,
            recipient=to,
            text=text,
            timestamp=format_timestamp(self.clock()),
            acked=True,
            pending=True,
        )
        # eco local antes de cualquier confirmación
        self.store.append_message(msg)
        self.bridge.submit(Route.INCOMING, msg.to_json())
        return msg
