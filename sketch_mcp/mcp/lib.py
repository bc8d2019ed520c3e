"""Transport selection and bind settings for the sketch-mcp server."""

from dataclasses import dataclass
from enum import Enum

from sketch_mcp.config import EnvVar, get_environment


class TransportType(str, Enum):
    """Supported MCP transport types."""

    STDIO = "stdio"
    HTTP = "http"
    SSE = "sse"


@dataclass
class ServerConfig:
    """Where and how the server listens.

    ``host`` and ``port`` only apply to the HTTP and SSE transports.
    """

    transport: TransportType = TransportType.STDIO
    host: str = "0.0.0.0"
    port: int = 18080

    @classmethod
    def from_env(
        cls,
        transport: TransportType | None = None,
        host: str | None = None,
        port: int | None = None,
    ) -> "ServerConfig":
        """Resolve bind settings: explicit argument, then MCP_HOST/MCP_PORT, then default."""
        return cls(
            transport=transport or TransportType.STDIO,
            host=get_environment(EnvVar.MCP_HOST, override=host),
            port=get_environment(EnvVar.MCP_PORT, override=port),
        )


def get_server_version() -> str:
    from sketch_mcp import __version__

    return __version__


__all__ = [
    "TransportType",
    "ServerConfig",
    "get_server_version",
]
