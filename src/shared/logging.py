"""
Logging setup shared by the REST gateway and the MCP server.

One plain-text ``basicConfig`` format for every module logger, plus short
correlation IDs that the request middleware stamps on HTTP log lines.
"""

import logging
import uuid

LOG_FORMAT = "%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s"


def setup_logging(service_name: str, level: str = "INFO") -> logging.Logger:
    """
    Return the named logger, configuring the root handler on first use.

    Args:
        service_name: Dotted module name used as the logger name.
        level: Log level string (e.g. 'INFO', 'DEBUG'); unknown names fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    return logging.getLogger(service_name)


def generate_correlation_id() -> str:
    """Twelve hex characters identifying one HTTP request in the logs."""
    return uuid.uuid4().hex[:12]
