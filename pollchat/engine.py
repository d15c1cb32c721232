import logging
from typing import Optional

from pollchat.core.config import DEFAULT_POLL_INTERVAL
from pollchat.core.enums.routes import Slot
from pollchat.core.scheduler import PollScheduler
from pollchat.services.auth import AuthService
from pollchat.services.chat import ChatService
from pollchat.services.http_bridge import HttpBridge
from pollchat.services.notices import NoticeBoard
from pollchat.services.roster import RosterService
from pollchat.state.store import Store
from pollchat.views.conversation import ConversationView
from pollchat.views.directory import DirectoryView


class SyncEngine:
    """
    Cablea store, puente HTTP, scheduler, servicios y vistas.
    - Al aparecer un usuario arranca el polling de directorio y contactos.
    - Al desaparecer (logout) detiene todos los pollers.
    """

    def __init__(self, bridge: HttpBridge, interval: float = DEFAULT_POLL_INTERVAL,
                 store: Optional[Store] = None):
        self.store = store or Store()
        self.notices = NoticeBoard()
        self.bridge = bridge
        self.scheduler = PollScheduler()

        self.auth = AuthService(bridge, self.store, self.notices)
        self.roster = RosterService(bridge, self.store, self.notices, self.scheduler, interval)
        self.chat = ChatService(bridge, self.store, self.notices, self.scheduler, interval)

        self.conversation = ConversationView(self.store, self.chat)
        self.directory = DirectoryView(self.store, self.roster, self.chat)

        self._current_uid: Optional[int] = None
        self._unsubscribe = self.store.subscribe(Slot.USER, self._on_user)

    def _on_user(self, profile):
        uid = profile.user_id if profile else None
        if uid == self._current_uid:
            return
        # cambio de sesión: nada del usuario anterior sigue pidiendo datos
        self.scheduler.stop_all()
        self._current_uid = uid
        if uid is not None:
            logging.info("[Engine] Sesión de UserId=%d: arrancando pollers", uid)
            self.roster.start_polling()
        else:
            logging.info("[Engine] Sin sesión: pollers detenidos")

    async def start(self):
        await self.bridge.start()

    async def stop(self):
        self.scheduler.stop_all()
        self._unsubscribe()
        self.conversation.close()
        self.directory.close()
        await self.bridge.stop()
