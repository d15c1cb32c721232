import pygame as pg
from typing import Dict, List, Tuple

from pollchat.core.theme import CLR
from pollchat.core.draw import rounded_rect, text
from pollchat.views.conversation import MessageRow

PENDING_MARK = "·"


def _split_long(font, word: str, maxw: int) -> List[str]:
    # trozos que quepan por ancho (URLs, hashes sin espacios)
    parts, cur = [], ""
    for ch in word:
        if cur and font.size(cur + ch)[0] > maxw:
            parts.append(cur)
            cur = ch
        else:
            cur += ch
    if cur:
        parts.append(cur)
    return parts


def wrap_text(font, body: str, maxw: int) -> List[str]:
    """Parte `body` en líneas de ancho <= maxw, respetando los saltos de línea."""
    lines: List[str] = []
    for para in body.split("\n"):
        line = ""
        for word in para.split():
            if font.size(word)[0] > maxw:
                if line:
                    lines.append(line)
                *full, line = _split_long(font, word, maxw)
                lines.extend(full)
                continue
            candidate = f"{line} {word}" if line else word
            if font.size(candidate)[0] <= maxw:
                line = candidate
            else:
                lines.append(line)
                line = word
        lines.append(line)
    return lines or [""]


class MessagesView:
    """
    Lista de burbujas de la conversación activa.
    - tx a la derecha, rx a la izquierda.
    - Los ecos locales sin confirmar llevan PENDING_MARK junto a la hora.
    - scroll_to_newest(): baja al final en el próximo draw.
    """

    def __init__(self):
        self._wrapped: Dict[Tuple[int, str, int], List[str]] = {}
        self.scroll = 0
        self._content_h = 0
        self._stick_bottom = False

    def _lines(self, font, body: str, maxw: int) -> List[str]:
        key = (id(font), body, maxw)
        if key not in self._wrapped:
            self._wrapped[key] = wrap_text(font, body, maxw)
        return self._wrapped[key]

    # ----------------------------
    # scroll
    # ----------------------------
    def scroll_to_newest(self):
        # se resuelve en el próximo draw, cuando ya se conoce el alto
        self._stick_bottom = True

    def _max_scroll(self, L) -> int:
        return max(0, self._content_h - L["messages"].h)

    def handle_event(self, e, L):
        if e.type == pg.MOUSEWHEEL and L["messages"].collidepoint(pg.mouse.get_pos()):
            step = int(40 * L["s"])
            self.scroll = max(0, min(self.scroll - e.y * step, self._max_scroll(L)))

    # ----------------------------
    # burbujas
    # ----------------------------
    def _bubbles(self, L, rows: List[MessageRow]):
        r = L["messages"]; pad = L["pad"]; f = L["fonts"]; s = L["s"]
        font, small = f["p"], f["xs"]
        inner = int(12 * s)
        gap = int(14 * s)
        maxw = L["bubble_max"]
        min_w = small.size("00:00 " + PENDING_MARK)[0] + inner * 2

        laid = []
        y = pad
        for m in rows:
            lines = self._lines(font, m.text, maxw - inner * 2)
            widest = max(font.size(line)[0] for line in lines)
            bw = min(maxw, max(min_w, widest + inner * 2))
            bh = len(lines) * font.get_linesize() + small.get_linesize() + inner * 2
            bx = r.right - pad * 2 - bw if m.side == "tx" else r.x + pad * 2
            laid.append((m, lines, pg.Rect(bx, y, bw, bh)))
            y += bh + gap
        self._content_h = y
        return laid

    def draw(self, surf, L, rows: List[MessageRow], placeholder: str = ""):
        r = L["messages"]; f = L["fonts"]
        font = f["p"]
        inner = int(12 * L["s"])

        if not rows:
            self._content_h = 0
            self.scroll = 0
            if placeholder:
                text(surf, placeholder, font, CLR["muted"], r.center, "center")
            return

        laid = self._bubbles(L, rows)
        if self._stick_bottom:
            self.scroll = self._max_scroll(L)
            self._stick_bottom = False
        self.scroll = max(0, min(self.scroll, self._max_scroll(L)))

        prev_clip = surf.get_clip()
        surf.set_clip(r)
        for m, lines, br in laid:
            br = br.move(0, r.y - self.scroll)
            if not br.colliderect(r):
                continue

            mine = m.side == "tx"
            rounded_rect(surf, br, CLR["primary"] if mine else CLR["bubble_rx"], L["r_lg"])
            fg = CLR["primary_fg"] if mine else CLR["text"]

            y = br.y + inner
            for line in lines:
                text(surf, line, font, fg, (br.x + inner, y))
                y += font.get_linesize()

            stamp = f"{m.time} {PENDING_MARK}" if m.pending else m.time
            text(surf, stamp, f["xs"], fg if mine else CLR["muted"], (br.x + inner, y))
        surf.set_clip(prev_clip)
