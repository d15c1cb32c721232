import pygame as pg

CAPTION = "PollChat"
# tamaño de referencia: todas las medidas escalan respecto a él
REF_SIZE = (1100, 720)
MIN_FONT_PX = 12

FONT_FAMILY = "Inter,Segoe UI,Arial"
FONT_PX = {"h1": 28, "h2": 20, "h3": 16, "p": 15, "xs": 12, "btn": 15}


def init_window():
    pg.display.set_caption(CAPTION)
    return pg.display.set_mode(REF_SIZE, pg.RESIZABLE)


def make_fonts(scale: float):
    return {
        name: pg.font.SysFont(FONT_FAMILY, max(MIN_FONT_PX, int(px * scale)))
        for name, px in FONT_PX.items()
    }


def _centered(w, h, box_w, box_h):
    return pg.Rect((w - box_w) // 2, (h - box_h) // 2, box_w, box_h)


def compute_layout(w, h):
    """
    Rects y medidas de la ventana actual.
    - Home: sidebar a la izquierda; a la derecha header / mensajes / input.
    - overlay: panel centrado de búsqueda de usuarios.
    - auth: columna central de la pantalla de login/registro.
    """
    s = min(w / REF_SIZE[0], h / REF_SIZE[1])

    def px(v):
        return int(v * s)

    sidebar = pg.Rect(0, 0, px(300), h)
    chat = pg.Rect(sidebar.right, 0, w - sidebar.w, h)
    header = pg.Rect(chat.x, 0, chat.w, px(72))
    input_r = pg.Rect(chat.x, h - px(80), chat.w, px(80))
    messages = pg.Rect(chat.x, header.bottom, chat.w, input_r.y - header.bottom)

    return {
        "s": s,
        "fonts": make_fonts(s),
        "pad": px(16),
        "r_lg": px(16),
        "r_sm": px(10),
        "bubble_max": min(px(520), int(messages.w * 0.7)),
        "sidebar": sidebar,
        "chat": chat,
        "header": header,
        "messages": messages,
        "input": input_r,
        "overlay": _centered(w, h, px(380), px(560)),
        "auth": pg.Rect((w - 320) // 2, px(48), 320, h - px(48)),
    }
