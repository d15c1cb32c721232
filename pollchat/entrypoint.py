import asyncio
import logging

from pollchat.core.config import get_runtime_config
from pollchat.engine import SyncEngine
from pollchat.services.http_bridge import HttpBridge


async def main():
    cfg = get_runtime_config()
    logging.basicConfig(
        level=cfg["log_level"],
        format="%(asctime)s - %(levelname)s - [UI] %(message)s",
        force=True,
    )
    logging.info("Iniciando UI (backend=%s, poll=%.2fs)", cfg["base_url"], cfg["poll_interval"])

    #  HTTP Bridge
    bridge = HttpBridge(cfg["base_url"])
    engine = SyncEngine(bridge, interval=cfg["poll_interval"])
    await engine.start()

    # import diferido: pygame solo hace falta para la UI
    from pollchat.app import run
    try:
        await run(engine)
    finally:
        await engine.stop()
        logging.info("[UI] Cerrado.")


def cli():
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
    except Exception:
        logging.exception("Fallo inesperado en la UI")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
