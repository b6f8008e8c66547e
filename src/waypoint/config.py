"""Server configuration.

ServerConfig is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups. It only configures the
hosting layer; routers have no configuration of their own.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """Hosting configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ServerConfig(port=3001, debug=True)
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False

    # Logging (forwarded to the ASGI server)
    log_level: str = "info"

    # Sent when no handler resolved the request
    not_found_body: str = "Not Found"
