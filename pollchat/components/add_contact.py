import pygame as pg
import pygame_gui
from typing import Optional, Tuple

from pollchat.core.theme import CLR
from pollchat.core.draw import rounded_rect, text, divider, dim
from pollchat.views.directory import DirectoryView


class AddContactOverlay:
    """
    Overlay modal "Add": caja de búsqueda (pygame_gui) + lista de resultados.
    La búsqueda la resuelve DirectoryView en cada tecla; aquí solo se pinta.

    handle_event devuelve ("add", user_id), ("close", None) o None.
    """

    def __init__(self, manager: pygame_gui.UIManager, view: DirectoryView):
        self.manager = manager
        self.view = view
        self.entry: Optional[pygame_gui.elements.UITextEntryLine] = None
        self._r_close = None
        self._r_list = None
        self._last_rect = None
        self._item_h_cached = 60

    # --- helpers ---
    def _item_h(self, L) -> int:
        return int(60 * L["s"])

    def _ensure_entry(self, L):
        r = L["overlay"]; pad = L["pad"]
        top = r.y + pad * 2 + L["fonts"]["h1"].get_linesize()
        rect = pg.Rect(r.x + pad, top, r.w - 2 * pad, int(40 * L["s"]))
        if self.entry is None:
            self.entry = pygame_gui.elements.UITextEntryLine(
                relative_rect=rect, manager=self.manager, placeholder_text="Search Users"
            )
            self.entry.focus()
        elif self._last_rect != rect:
            self.entry.set_relative_position(rect.topleft)
            self.entry.set_dimensions(rect.size)
        self._last_rect = rect
        self._r_list = pg.Rect(r.x + pad, rect.bottom + pad, r.w - 2 * pad, r.bottom - pad - (rect.bottom + pad))

    def _kill_entry(self):
        if self.entry is not None:
            self.entry.kill()
            self.entry = None
            self._last_rect = None

    # --- API ---
    def sync(self, L):
        """Crea o destruye la caja de búsqueda según la visibilidad del overlay."""
        if self.view.overlay_visible:
            self._ensure_entry(L)
        else:
            self._kill_entry()

    def handle_event(self, e) -> Optional[Tuple[str, Optional[int]]]:
        if not self.view.overlay_visible:
            return None

        if e.type == pygame_gui.UI_TEXT_ENTRY_CHANGED and e.ui_element == self.entry:
            self.view.set_query(e.text)
            return None

        if e.type == pg.KEYDOWN and e.key == pg.K_ESCAPE:
            return ("close", None)

        if e.type == pg.MOUSEBUTTONDOWN and e.button == 1:
            if self._r_close and self._r_close.collidepoint(e.pos):
                return ("close", None)
            if self._r_list and self._r_list.collidepoint(e.pos):
                idx = (e.pos[1] - self._r_list.y) // self._item_h_cached
                if 0 <= idx < len(self.view.results):
                    return ("add", self.view.results[idx].user_id)
        return None

    def draw(self, surf, L):
        if not self.view.overlay_visible:
            return
        r = L["overlay"]; pad = L["pad"]; f = L["fonts"]
        self._item_h_cached = self._item_h(L)

        dim(surf)
        rounded_rect(surf, r, CLR["surface_alt"], L["r_lg"])
        text(surf, "Add", f["h1"], CLR["text"], (r.x + pad, r.y + pad))

        size = int(36 * L["s"])
        self._r_close = pg.Rect(r.right - pad - size, r.y + pad, size, size)
        pg.draw.circle(surf, CLR["danger"], self._r_close.center, size // 2)
        text(surf, "×", f["h2"], CLR["primary_fg"], self._r_close.center, "center")

        if self._r_list is None:
            return
        prev_clip = surf.get_clip()
        surf.set_clip(self._r_list)
        y = self._r_list.y
        for u in self.view.results:
            row = pg.Rect(self._r_list.x, y, self._r_list.w, self._item_h_cached)
            if row.collidepoint(pg.mouse.get_pos()):
                rounded_rect(surf, row, CLR["panel"], L["r_sm"])
            text(surf, u.display_name or u.email, f["h3"], CLR["text"], (row.x + 8, row.y + 6))
            text(surf, u.email, f["xs"], CLR["muted"], (row.x + 8, row.y + 8 + f["h3"].get_linesize()))
            divider(surf, row.x, row.bottom - 1, row.right)
            y += self._item_h_cached
        surf.set_clip(prev_clip)
