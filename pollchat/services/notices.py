import logging
from collections import deque
from typing import Callable, Deque, List, Optional

Handler = Callable[[str], None]


class NoticeBoard:
    """
    Avisos visibles para el usuario (equivalente a un alert modal).

    - alert(text): encola el aviso y notifica a los suscriptores.
      Si el mismo texto ya está esperando a mostrarse no se duplica.
    - take(): saca el aviso más antiguo (la UI lo muestra de uno en uno).
    """

    def __init__(self):
        self._queue: Deque[str] = deque()
        self._subs: List[Handler] = []

    def subscribe(self, handler: Handler):
        self._subs.append(handler)

    def alert(self, text: str) -> bool:
        if text in self._queue:
            logging.debug("[Notice] Aviso ya pendiente: %s", text)
            return False
        logging.warning("[Notice] %s", text)
        self._queue.append(text)
        for h in list(self._subs):
            try:
                h(text)
            except Exception:
                logging.exception("[Notice] Handler error")
        return True

    def take(self) -> Optional[str]:
        return self._queue.popleft() if self._queue else None

    def pending(self) -> List[str]:
        return list(self._queue)

    def __len__(self) -> int:
        return len(self._queue)
