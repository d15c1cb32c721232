from enum import Enum


class Route(str, Enum):
    """
    Rutas del backend HTTP. Todas se consumen con POST y cuerpo JSON.
    """
    LOGIN = "/login"
    REGISTER = "/register"
    CONTACTS = "/getcontacts"
    ALL_USERS = "/allusers"
    ADD_CONTACT = "/addcontact"
    MESSAGES = "/getmessages"
    INCOMING = "/incoming"   # envío de mensaje (fire-and-forget)


class Slot(str, Enum):
    USER = "user"
    SELECTED = "selected_contact_id"
    MESSAGES = "messages"
    CONTACTS = "contacts"
    USERS = "users"


NO_SELECTION = -1
