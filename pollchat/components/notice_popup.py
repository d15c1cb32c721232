import pygame as pg
import pygame_gui
from typing import Optional

from pollchat.services.notices import NoticeBoard


class NoticePopup:
    """
    Muestra los avisos del NoticeBoard como ventana modal de pygame_gui,
    de uno en uno: el siguiente sale cuando el usuario cierra el actual.
    """

    def __init__(self, manager: pygame_gui.UIManager, notices: NoticeBoard, title: str = "PollChat"):
        self.manager = manager
        self.notices = notices
        self.title = title
        self.window: Optional[pygame_gui.windows.UIMessageWindow] = None

    def _mgr_size(self):
        try:
            return self.manager.get_window_resolution()
        except Exception:
            surf = pg.display.get_surface()
            return surf.get_size() if surf else (1280, 800)

    def update(self):
        """Llamar cada frame."""
        if self.window is not None and not self.window.alive():
            self.window = None
        if self.window is not None:
            return
        msg = self.notices.take()
        if msg is None:
            return
        w, h = self._mgr_size()
        ww, hh = 360, 200
        self.window = pygame_gui.windows.UIMessageWindow(
            rect=pg.Rect((w - ww) // 2, (h - hh) // 2, ww, hh),
            html_message=msg,
            manager=self.manager,
            window_title=self.title,
        )
        # modal
        self.window.set_blocking(True)

    @property
    def is_open(self) -> bool:
        return self.window is not None and self.window.alive()
