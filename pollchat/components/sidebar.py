import pygame as pg
from typing import List, Optional, Tuple

from pollchat.core.theme import CLR
from pollchat.core.draw import rounded_rect, text, divider, button
from pollchat.views.directory import ContactRow


class Sidebar:
    def __init__(self):
        self.scroll = 0

    #  Helpers internos
    def _item_h(self, L) -> int:
        return int(68 * L["s"])

    def _btn_rect(self, L) -> pg.Rect:
        r = L["sidebar"]; pad = L["pad"]
        btn_h = int(50 * L["s"])
        return pg.Rect(r.x + pad, r.bottom - pad - btn_h, r.w - 2*pad, btn_h)

    def _list_start_y(self, L) -> int:
        r = L["sidebar"]
        return r.y + L["pad"]*2 + L["fonts"]["h2"].get_linesize()

    def _list_view_height(self, L) -> int:
        return self._btn_rect(L).top - L["pad"] - self._list_start_y(L)

    def _max_scroll(self, L, n_items: int) -> int:
        content_h = max(0, n_items * self._item_h(L))
        return max(0, content_h - max(0, self._list_view_height(L)))

    def _clamp_scroll(self, L, n_items: int):
        self.scroll = max(0, min(self.scroll, self._max_scroll(L, n_items)))

    #  Eventos
    def handle_event(self, e, L, rows: List[ContactRow]) -> Optional[Tuple[str, Optional[int]]]:
        """
        Devuelve:
          - ("select", user_id) al pulsar un contacto,
          - ("add", None) al pulsar 'Add contact',
          - None si no hay cambio.
        """
        r = L["sidebar"]; pad = L["pad"]
        item_h = self._item_h(L)
        start_y = self._list_start_y(L)
        n = len(rows)

        if e.type == pg.MOUSEWHEEL:
            if r.collidepoint(pg.mouse.get_pos()):
                self.scroll -= e.y * (item_h // 2)
                self._clamp_scroll(L, n)
            return None

        if e.type == pg.MOUSEBUTTONDOWN and e.button == 1 and r.collidepoint(e.pos):
            mx, my = e.pos
            btn = self._btn_rect(L)
            if btn.collidepoint(mx, my):
                return ("add", None)

            if start_y <= my < btn.top - pad:
                idx = ((my - start_y) + self.scroll) // item_h
                if 0 <= idx < n:
                    return ("select", rows[idx].user_id)
        return None

    #  Dibujo
    def draw(self, surf, L, rows: List[ContactRow], loading: bool = False):
        r = L["sidebar"]; pad = L["pad"]; f = L["fonts"]
        rounded_rect(surf, r, CLR["sidebar"], 0)
        text(surf, "Chats", f["h2"], CLR["text"], (r.x + pad, r.y + pad))

        self._clamp_scroll(L, len(rows))
        start_y = self._list_start_y(L)
        view = pg.Rect(r.x, start_y, r.w, max(0, self._list_view_height(L)))

        if not rows:
            msg = "Loading..." if loading else "No contacts found"
            text(surf, msg, f["p"], CLR["muted"], (r.x + pad, start_y + pad))

        prev_clip = surf.get_clip()
        surf.set_clip(view)

        y = start_y - self.scroll
        item_h = self._item_h(L)
        for row in rows:
            rr = pg.Rect(r.x, y, r.w, item_h)
            if row.selected:
                rounded_rect(surf, rr.inflate(-4, -4), CLR["sidebar_sel"], L["r_sm"])
            divider(surf, rr.x + pad, rr.bottom - 1, rr.right - pad)

            # Avatar con inicial
            av = pg.Rect(r.x + pad, rr.y + (item_h - int(42 * L["s"])) // 2,
                         int(42 * L["s"]), int(42 * L["s"]))
            pg.draw.circle(surf, CLR["accent"], av.center, av.w // 2)
            initial = (row.name or row.email or "?")[:1].upper()
            text(surf, initial, f["h3"], CLR["text"], av.center, "center")

            tx = av.right + 10
            room = rr.right - pad - tx
            if row.descr:
                d = text(surf, row.descr, f["xs"], CLR["muted"], (rr.right - pad, av.y), "topright",
                         max_w=room // 3)
                name_w = d.x - 8 - tx
            else:
                name_w = room
            text(surf, row.name or row.email, f["h3"], CLR["text"], (tx, av.y), max_w=name_w)
            text(surf, row.email, f["xs"], CLR["muted"],
                 (tx, av.y + f["h3"].get_linesize() + 2), max_w=room)
            y += item_h

        surf.set_clip(prev_clip)

        button(surf, self._btn_rect(L), "+  Add contact", f["btn"], radius=L["r_sm"])
