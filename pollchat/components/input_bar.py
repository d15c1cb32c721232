import pygame as pg
from pollchat.core.theme import CLR
from pollchat.core.draw import rounded_rect, text, button
from pollchat.views.conversation import ConversationView

PLACEHOLDER = "Text Message"
BLINK_FRAMES = 30


class InputBar:
    """
    Caja de texto del chat. El texto vive en ConversationView.draft.
    handle_event() devuelve "send" cuando el usuario pide enviar; quien llama
    hace view.submit().
    """

    def __init__(self, view: ConversationView):
        self.view = view
        self.focus = False
        self.enabled = True
        self._frame = 0
        self._box = self._edit = self._send = None

    def _place(self, L):
        area = L["input"]; pad = L["pad"]; s = L["s"]
        inner = int(10 * s)
        box = pg.Rect(0, 0, area.w - 2 * pad, min(int(56 * s), area.h - pad))
        box.midbottom = (area.centerx, area.bottom - pad)
        send = pg.Rect(0, 0, int(72 * s), box.h - 2 * inner)
        send.midright = (box.right - inner, box.centery)
        edit = pg.Rect(box.x + inner, send.y, send.x - inner - (box.x + inner), send.h)
        self._box, self._edit, self._send = box, edit, send

    def _wants_send(self) -> bool:
        return self.enabled and bool(self.view.draft.strip())

    def _erase(self, whole_word: bool):
        draft = self.view.draft
        if whole_word:
            draft = draft.rstrip()
            cut = draft.rfind(" ")
            self.view.draft = draft[:cut + 1] if cut >= 0 else ""
        else:
            self.view.draft = draft[:-1]

    def handle_event(self, e):
        if self._box is None:
            return None

        if e.type == pg.MOUSEBUTTONDOWN and e.button == 1:
            self.focus = self._box.collidepoint(e.pos)
            if self.focus and self._send.collidepoint(e.pos) and self._wants_send():
                return "send"
            return None

        if not self.focus:
            return None

        if e.type == pg.KEYDOWN:
            if e.key in (pg.K_RETURN, pg.K_KP_ENTER):
                return "send" if self._wants_send() else None
            if e.key == pg.K_ESCAPE:
                self.focus = False
            elif e.key == pg.K_BACKSPACE:
                self._erase(whole_word=bool(e.mod & pg.KMOD_CTRL))
        elif e.type == pg.TEXTINPUT and self.enabled:
            self.view.draft += e.text
        return None

    def draw(self, surf, L, enabled=True):
        self.enabled = enabled
        self._place(L)
        f = L["fonts"]; inner = int(10 * L["s"])
        edit = self._edit

        rounded_rect(surf, self._box, CLR["panel"], L["r_sm"], border=1)
        rounded_rect(surf, edit, CLR["surface_alt"], L["r_sm"])
        button(surf, self._send, "Send", f["btn"],
               bg=CLR["primary"] if self._wants_send() else CLR["accent"], radius=L["r_sm"])

        draft = self.view.draft
        font = f["p"]
        x = edit.x + inner
        if draft:
            # con texto largo se ve siempre el final, donde se escribe
            overflow = font.size(draft)[0] - (edit.w - 2 * inner)
            x -= max(0, overflow)

        prev_clip = surf.get_clip()
        surf.set_clip(edit)
        r = text(surf, draft or PLACEHOLDER, font, CLR["text"] if draft else CLR["muted"],
                 (x, edit.centery), "midleft")

        self._frame = (self._frame + 1) % (2 * BLINK_FRAMES)
        if self.focus and self._frame < BLINK_FRAMES:
            cx = (r.right if draft else edit.x + inner) + 2
            pg.draw.line(surf, CLR["muted"], (cx, edit.y + 8), (cx, edit.bottom - 8), 2)
        surf.set_clip(prev_clip)
