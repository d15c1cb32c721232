import pygame as pg
from pollchat.core.theme import CLR


def rounded_rect(surf, rect, color, radius, border=0, border_color=None):
    pg.draw.rect(surf, color, rect, border_radius=radius)
    if border:
        pg.draw.rect(surf, border_color or CLR["border"], rect, width=border, border_radius=radius)


def text(surf, s, font, color, pos, anchor="topleft", max_w=None):
    """Pinta `s` anclado en `pos`. Con max_w recorta con '…' si no cabe."""
    if max_w is not None and font.size(s)[0] > max_w:
        while s and font.size(s + "…")[0] > max_w:
            s = s[:-1]
        s += "…"
    img = font.render(s, True, color)
    r = img.get_rect(**{anchor: pos})
    surf.blit(img, r)
    return r


def divider(surf, x1, y, x2):
    pg.draw.line(surf, CLR["border"], (x1, y), (x2, y))


def button(surf, rect, label, font, bg=None, fg=None, radius=10):
    rounded_rect(surf, rect, bg or CLR["primary"], radius)
    text(surf, label, font, fg or CLR["primary_fg"], rect.center, "center", max_w=rect.w - 8)


def dim(surf, rect=None):
    """Velo semitransparente para overlays modales."""
    rect = rect or surf.get_rect()
    veil = pg.Surface(rect.size, pg.SRCALPHA)
    veil.fill(CLR["overlay_dim"])
    surf.blit(veil, rect.topleft)
