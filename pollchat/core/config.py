import logging
import os

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8090
DEFAULT_POLL_INTERVAL = 1.0


def get_backend_host() -> str:
    return os.environ.get("BACKEND_HOST") or DEFAULT_HOST

def get_backend_port() -> int:
    raw = os.environ.get("BACKEND_PORT")
    if not raw:
        return DEFAULT_PORT
    try:
        port = int(raw)
    except ValueError:
        logging.warning("[Config] BACKEND_PORT inválido (%r), uso %d", raw, DEFAULT_PORT)
        return DEFAULT_PORT
    return port if 0 < port < 65536 else DEFAULT_PORT

def get_base_url() -> str:
    return f"http://{get_backend_host()}:{get_backend_port()}"

def get_poll_interval() -> float:
    # Soporta "1", "0.5"; no positivos o basura -> por defecto
    raw = os.environ.get("POLL_INTERVAL")
    if not raw:
        return DEFAULT_POLL_INTERVAL
    try:
        val = float(raw)
    except ValueError:
        return DEFAULT_POLL_INTERVAL
    return val if val > 0 else DEFAULT_POLL_INTERVAL

def get_log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO

def get_runtime_config() -> dict:
    return {
        "host": get_backend_host(),
        "port": get_backend_port(),
        "base_url": get_base_url(),
        "poll_interval": get_poll_interval(),
        "log_level": get_log_level(),
    }
