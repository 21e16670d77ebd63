import logging
import os
import socket

from indicator_browser.logging_config import configure_logging
from indicator_browser.ui.dash_app import create_dash_app

CONFIG_ROOT_ENV = "INDICATOR_BROWSER_CONFIG_ROOT"

configure_logging()
logger = logging.getLogger(__name__)

app = create_dash_app(os.getenv(CONFIG_ROOT_ENV, "config"))
server = app.server


def _port_is_free(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
        except OSError:
            return False
    return True


def pick_port(host: str, preferred: int, attempts: int = 20) -> int:
    """First bindable port in [preferred, preferred + attempts), else preferred."""
    for port in range(preferred, preferred + attempts):
        if _port_is_free(host, port):
            return port
    return preferred


def main() -> None:
    host = os.getenv("HOST", "0.0.0.0")
    preferred = int(os.getenv("PORT", "8050"))
    port = pick_port(host, preferred)
    if port != preferred:
        logger.warning("Preferred port busy", extra={"preferred_port": preferred, "port": port})

    app.run(host=host, port=port, debug=os.getenv("DEBUG", "0") == "1")


if __name__ == "__main__":
    main()
