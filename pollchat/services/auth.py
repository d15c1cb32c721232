import logging
from dataclasses import dataclass
from typing import Any, Optional

from pollchat.core.enums.routes import Route
from pollchat.services.http_bridge import BackendError, HttpBridge
from pollchat.services.notices import NoticeBoard
from pollchat.state.models import UserProfile
from pollchat.state.store import Store

MSG_LOGIN_ERROR = "Error logging in. Try different email/password or please try again later"
MSG_REGISTER_ERROR = "Error creating an account. Try different email or please try again later"
MSG_REGISTER_OK = "User created successfully!"


def _profile_or_none(payload: Any) -> Optional[UserProfile]:
    if not isinstance(payload, dict) or payload.get("UserId") is None:
        return None
    try:
        return UserProfile.from_json(payload)
    except (TypeError, ValueError):
        return None


@dataclass
class AuthService:
    bridge: HttpBridge
    store: Store
    notices: NoticeBoard

    async def login(self, email: str, password: str) -> Optional[UserProfile]:
        body = {"Email": email, "Password": password}
        try:
            payload = await self.bridge.post(Route.LOGIN, body)
        except BackendError as e:
            logging.warning("[Auth] Login de %s falló: %s", email, e)
            self.notices.alert(MSG_LOGIN_ERROR)
            return None
        profile = _profile_or_none(payload)
        if profile is None:
            logging.warning("[Auth] Login de %s sin perfil en la respuesta", email)
            self.notices.alert(MSG_LOGIN_ERROR)
            return None
        logging.info("[Auth] Sesión iniciada: UserId=%d", profile.user_id)
        self.store.set_user(profile)
        return profile

    async def register(self, email: str, password: str, firstname: str,
                       lastname: str, descr: str = "") -> Optional[UserProfile]:
        body = {
            "Email": email,
            "Password": password,
            "Firstname": firstname,
            "Lastname": lastname,
            "Descr": descr,
        }
        try:
            payload = await self.bridge.post(Route.REGISTER, body)
        except BackendError as e:
            logging.warning("[Auth] Registro de %s falló: %s", email, e)
            self.notices.alert(MSG_REGISTER_ERROR)
            return None
        profile = _profile_or_none(payload)
        if profile is None:
            self.notices.alert(MSG_REGISTER_ERROR)
            return None
        self.notices.alert(MSG_REGISTER_OK)
        logging.info("[Auth] Cuenta creada: UserId=%d", profile.user_id)
        self.store.set_user(profile)
        return profile

    def logout(self):
        if self.store.user is None:
            return
        logging.info("[Auth] Cerrando sesión de UserId=%d", self.store.user_id)
        self.store.clear_user()
