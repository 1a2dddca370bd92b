import os
import socket

from roster_browser.core.sorting import use_system_collation
from roster_browser.logging_config import configure_logging
from roster_browser.ui.dash_app import create_dash_app

configure_logging()
use_system_collation()

app = create_dash_app(os.getenv("ROSTER_CONFIG_ROOT", "config"))
server = app.server


def find_free_port(start_port: int, attempts: int = 100) -> int:
    """First port at or above start_port that nothing listens on."""
    for port in range(start_port, start_port + attempts):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            if s.connect_ex(("localhost", port)) != 0:
                return port
    return start_port


def main() -> None:
    preferred_port = int(os.getenv("PORT", "8050"))
    port = find_free_port(preferred_port)
    if port != preferred_port:
        print(f"Port {preferred_port} is busy, serving the roster on {port}")

    app.run(host="0.0.0.0", port=port, debug=os.getenv("DEBUG", "0") == "1")


if __name__ == "__main__":
    main()
