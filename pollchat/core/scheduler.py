import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from pollchat.core.schemas.scheduled_task import ScheduledTask


class PollScheduler:
    """
    Tareas periódicas cancelables, indexadas por recurso.

    Un recurso ('messages', 'contacts', ...) tiene como mucho un scope activo:
    start() sobre un recurso ya programado cancela el anterior y arranca el
    nuevo en la misma llamada síncrona, sin ventana con dos timers vivos.

    Cada tick lanza action() como tarea propia sin esperar a la anterior,
    así que pueden solaparse peticiones del mismo recurso. stop() corta los
    ticks futuros pero no cancela peticiones ya emitidas.
    """

    def __init__(self):
        self._tasks: Dict[str, ScheduledTask] = {}

    #  ciclo de vida
    def start(
        self,
        resource: str,
        scope: Any,
        action: Callable[[], Awaitable[None]],
        interval: float,
        immediate: bool = True,
    ) -> ScheduledTask:
        self.stop(resource)
        task = ScheduledTask(resource=resource, scope=scope, action=action,
                             interval=interval, immediate=immediate)
        task.runner = asyncio.get_running_loop().create_task(
            self._runner(task), name=f"poll:{resource}:{scope}"
        )
        self._tasks[resource] = task
        logging.info("[Scheduler] %s programado (scope=%s, cada %.2fs)", resource, scope, interval)
        return task

    def stop(self, resource: str) -> bool:
        task = self._tasks.pop(resource, None)
        if task is None:
            return False
        if task.runner:
            task.runner.cancel()
        logging.info("[Scheduler] %s detenido (scope=%s)", resource, task.scope)
        return True

    def stop_all(self):
        for resource in list(self._tasks):
            self.stop(resource)

    #  introspección
    def is_running(self, resource: str) -> bool:
        return resource in self._tasks

    def scope_of(self, resource: str) -> Optional[Any]:
        task = self._tasks.get(resource)
        return task.scope if task else None

    def get(self, resource: str) -> Optional[ScheduledTask]:
        return self._tasks.get(resource)

    #  bucle
    async def _runner(self, task: ScheduledTask):
        try:
            if task.immediate:
                self._fire(task)
            while True:
                await asyncio.sleep(task.interval)
                self._fire(task)
        except asyncio.CancelledError:
            pass

    def _fire(self, task: ScheduledTask):
        task.ticks += 1
        tick = asyncio.ensure_future(task.action())
        task.inflight.add(tick)

        def _done(fut: asyncio.Future):
            task.inflight.discard(fut)
            if fut.cancelled():
                return
            exc = fut.exception()
            if exc is not None:
                # sin backoff: el siguiente tick vuelve a intentarlo
                logging.error("[Scheduler] Error ejecutando %s (scope=%s): %r",
                              task.resource, task.scope, exc)

        tick.add_done_callback(_done)
