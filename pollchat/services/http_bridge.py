import asyncio
import contextlib
import json
import logging
from typing import Any, Dict, Optional, Set

import aiohttp

from pollchat.core.enums.routes import Route


class BackendError(Exception):
    """Fallo de una petición: status HTTP no-2xx o error de transporte (status=None)."""

    def __init__(self, route: str, status: Optional[int] = None, reason: str = ""):
        self.route = route
        self.status = status
        self.reason = reason
        detail = f"HTTP {status}" if status is not None else (reason or "transport error")
        super().__init__(f"{route}: {detail}")


def _route_path(route) -> str:
    return route.value if isinstance(route, Route) else str(route)


class HttpBridge:
    """
    Puente HTTP hacia el backend.
    - start(): abre la ClientSession (sin timeout: las peticiones no caducan).
    - post(route, body): (async) POST JSON; devuelve el JSON decodificado o
      None si el cuerpo viene vacío. Lanza BackendError si falla.
    - submit(route, body): dispara post() sin esperar respuesta; los fallos
      solo se registran en el log.
    - stop(): espera los envíos pendientes y cierra la sesión.
    """

    def __init__(self, base_url: str = "http://127.0.0.1:8090"):
        self.base_url = base_url.rstrip("/")
        self._session: Optional[aiohttp.ClientSession] = None
        self._pending: Set[asyncio.Task] = set()

    #  lifecycle
    async def start(self) -> None:
        if self._session is not None:
            return
        timeout = aiohttp.ClientTimeout(total=None)
        self._session = aiohttp.ClientSession(base_url=self.base_url, timeout=timeout)
        logging.info("[HTTP] Sesión abierta contra %s", self.base_url)

    async def stop(self) -> None:
        if self._pending:
            with contextlib.suppress(Exception):
                await asyncio.gather(*self._pending, return_exceptions=True)
        if self._session is not None:
            await self._session.close()
            self._session = None
            logging.info("[HTTP] Sesión cerrada.")

    @property
    def started(self) -> bool:
        return self._session is not None

    #  API
    async def post(self, route, body: Dict[str, Any]) -> Any:
        path = _route_path(route)
        if self._session is None:
            raise BackendError(path, reason="bridge not started")
        try:
            async with self._session.post(path, json=body) as resp:
                raw = await resp.text()
                if not 200 <= resp.status < 300:
                    logging.debug("[HTTP] %s -> %d %s", path, resp.status, raw[:200])
                    raise BackendError(path, status=resp.status)
        except aiohttp.ClientError as e:
            raise BackendError(path, reason=str(e) or e.__class__.__name__) from e

        if not raw.strip():
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise BackendError(path, reason="invalid JSON body") from e

    def submit(self, route, body: Dict[str, Any]) -> asyncio.Task:
        path = _route_path(route)
        task = asyncio.get_running_loop().create_task(self.post(route, body), name=f"submit:{path}")
        self._pending.add(task)

        def _done(t: asyncio.Task):
            self._pending.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                logging.warning("[HTTP] Envío a %s fallido: %s", path, exc)

        task.add_done_callback(_done)
        return task
