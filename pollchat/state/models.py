import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class UserProfile:
    user_id: int
    email: str = ""
    firstname: str = ""
    lastname: str = ""
    descr: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.firstname} {self.lastname}".strip()

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "UserProfile":
        return cls(
            user_id=int(raw["UserId"]),
            email=str(raw.get("Email") or ""),
            firstname=str(raw.get("Firstname") or ""),
            lastname=str(raw.get("Lastname") or ""),
            descr=str(raw.get("Descr") or ""),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            "UserId": self.user_id,
            "Email": self.email,
            "Firstname": self.firstname,
            "Lastname": self.lastname,
            "Descr": self.descr,
        }


# Un contacto tiene la misma forma que un perfil de usuario
Contact = UserProfile


@dataclass(frozen=True)
class Message:
    sender: int
    recipient: int
    text: str
    timestamp: str = ""
    acked: bool = False
    # solo local: True mientras sea un eco optimista sin confirmar
    pending: bool = field(default=False, compare=False)

    @classmethod
    def from_json(cls, raw: Dict[str, Any]) -> "Message":
        return cls(
            sender=int(raw["From"]),
            recipient=int(raw["To"]),
            text=str(raw.get("Message") or ""),
            timestamp=str(raw.get("Timestamp") or ""),
            acked=bool(raw.get("Acked")),
        )

    def to_json(self) -> Dict[str, Any]:
        # El backend guarda Acked como entero
        return {
            "From": self.sender,
            "To": self.recipient,
            "Message": self.text,
            "Timestamp": self.timestamp,
            "Acked": 1 if self.acked else 0,
        }


def parse_profiles(payload: Optional[List[Dict[str, Any]]]) -> List[UserProfile]:
    """Lista de perfiles desde el JSON del backend; null/vacío -> []."""
    if not payload:
        return []
    if not isinstance(payload, list):
        logging.warning("[Models] Se esperaba una lista de perfiles: %r", payload)
        return []
    try:
        return [UserProfile.from_json(r) for r in payload]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logging.warning("[Models] Lista de perfiles malformada (%r): %r", e, payload)
        return []


def parse_messages(payload: Optional[List[Dict[str, Any]]]) -> List[Message]:
    if not payload:
        return []
    if not isinstance(payload, list):
        logging.warning("[Models] Se esperaba una lista de mensajes: %r", payload)
        return []
    try:
        return [Message.from_json(r) for r in payload]
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logging.warning("[Models] Lista de mensajes malformada (%r): %r", e, payload)
        return []
