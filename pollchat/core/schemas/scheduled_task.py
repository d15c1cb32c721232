import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Set

@dataclass
class ScheduledTask:
    resource: str
    scope: Any
    action: Callable[[], Awaitable[None]]
    interval: float
    immediate: bool = True
    ticks: int = 0
    runner: Optional[asyncio.Task] = None
    inflight: Set[asyncio.Task] = field(default_factory=set)
