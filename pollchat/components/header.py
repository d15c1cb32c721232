import pygame as pg
from pollchat.core.theme import CLR
from pollchat.core.draw import rounded_rect, text, divider, button


class ChatHeader:
    def __init__(self):
        self._r_logout = None

    def _logout_rect(self, L) -> pg.Rect:
        r = L["header"]; pad = L["pad"]
        w, h = int(96 * L["s"]), int(36 * L["s"])
        return pg.Rect(r.right - pad - w, r.centery - h // 2, w, h)

    def handle_event(self, e):
        """Devuelve "logout" si se pulsa el botón de cerrar sesión."""
        if self._r_logout is None:
            return None
        if e.type == pg.MOUSEBUTTONDOWN and e.button == 1 and self._r_logout.collidepoint(e.pos):
            return "logout"
        return None

    def draw(self, surf, L, title="Messages", subtitle="", user_name=""):
        r = L["header"]; pad = L["pad"]; f = L["fonts"]

        rounded_rect(surf, r, CLR["bg"], 0)
        divider(surf, r.x, r.bottom-1, r.right)

        av = pg.Rect(r.x + pad, r.y + pad, int(40 * L["s"]), int(40 * L["s"]))
        pg.draw.circle(surf, CLR["accent"], av.center, av.w // 2)
        text(surf, (title or "?")[:1].upper(), f["h3"], CLR["text"], av.center, "center")

        text(surf, title, f["h3"], CLR["text"], (av.right + 10, av.y))
        if subtitle:
            text(surf, subtitle, f["xs"], CLR["muted"], (av.right + 10, av.y + f["h3"].get_linesize() + 2))

        self._r_logout = self._logout_rect(L)
        button(surf, self._r_logout, "Logout", f["xs"], bg=CLR["danger"], radius=L["r_sm"])
        if user_name:
            text(surf, user_name, f["xs"], CLR["muted"],
                 (self._r_logout.x - pad, self._r_logout.centery), "midright")
