import pygame as pg
import pygame_gui
from typing import Dict, Optional, Tuple

from pollchat.core.theme import CLR
from pollchat.core.draw import text

LOGIN_FIELDS = ("email", "password")
REGISTER_FIELDS = ("email", "password", "firstname", "lastname", "descr")
PLACEHOLDERS = {
    "email": "Email address",
    "password": "Password",
    "firstname": "First name",
    "lastname": "Last name",
    "descr": "About you",
}


class AuthForm:
    """
    Pantalla de acceso: login o registro con widgets de pygame_gui.

    handle_event devuelve ("login", {...}) | ("register", {...}) | None.
    """

    def __init__(self, manager: pygame_gui.UIManager):
        self.manager = manager
        self.mode = "login"
        self.entries: Dict[str, pygame_gui.elements.UITextEntryLine] = {}
        self.submit_btn: Optional[pygame_gui.elements.UIButton] = None
        self.toggle_btn: Optional[pygame_gui.elements.UIButton] = None
        self._size = None

    # --- helpers ---
    def _fields(self):
        return LOGIN_FIELDS if self.mode == "login" else REGISTER_FIELDS

    def _build(self, size):
        self.kill()
        w, h = size
        fw, fh, gap = 320, 36, 12
        n = len(self._fields())
        top = max(140, (h - (n + 2) * (fh + gap)) // 2)
        x = (w - fw) // 2

        for i, name in enumerate(self._fields()):
            entry = pygame_gui.elements.UITextEntryLine(
                relative_rect=pg.Rect(x, top + i * (fh + gap), fw, fh),
                manager=self.manager,
                placeholder_text=PLACEHOLDERS[name],
            )
            if name == "password":
                entry.set_text_hidden(True)
            self.entries[name] = entry

        y = top + n * (fh + gap)
        label = "Sign in" if self.mode == "login" else "Create account"
        self.submit_btn = pygame_gui.elements.UIButton(
            relative_rect=pg.Rect(x, y, fw, fh), text=label, manager=self.manager
        )
        other = "Not a member? Create an account" if self.mode == "login" else "Back to sign in"
        self.toggle_btn = pygame_gui.elements.UIButton(
            relative_rect=pg.Rect(x, y + fh + gap, fw, fh), text=other, manager=self.manager
        )
        self.entries["email"].focus()
        self._size = size

    def _values(self) -> Dict[str, str]:
        return {k: e.get_text().strip() if k != "password" else e.get_text()
                for k, e in self.entries.items()}

    def _ready(self, values: Dict[str, str]) -> bool:
        required = ("email", "password") if self.mode == "login" else ("email", "password", "firstname", "lastname")
        return all(values.get(k) for k in required)

    # --- API ---
    def show(self, size):
        if not self.entries or self._size != size:
            self._build(size)

    def kill(self):
        for e in self.entries.values():
            e.kill()
        self.entries.clear()
        for b in (self.submit_btn, self.toggle_btn):
            if b is not None:
                b.kill()
        self.submit_btn = self.toggle_btn = None
        self._size = None

    def handle_event(self, e) -> Optional[Tuple[str, Dict[str, str]]]:
        if not self.entries:
            return None
        if e.type == pygame_gui.UI_BUTTON_PRESSED:
            if e.ui_element == self.toggle_btn:
                self.mode = "register" if self.mode == "login" else "login"
                self._build(self._size)
                return None
            if e.ui_element == self.submit_btn:
                return self._submit()
        if e.type == pygame_gui.UI_TEXT_ENTRY_FINISHED and e.ui_element in self.entries.values():
            return self._submit()
        return None

    def _submit(self):
        values = self._values()
        if not self._ready(values):
            return None
        return (self.mode, values)

    def draw(self, surf, L):
        f = L["fonts"]
        col = L["auth"]
        title = "Sign in to your account" if self.mode == "login" else "Create your account"
        r = text(surf, "PollChat", f["h1"], CLR["primary"], col.midtop, "midtop")
        text(surf, title, f["h2"], CLR["text"], (col.centerx, r.bottom + 8), "midtop")
