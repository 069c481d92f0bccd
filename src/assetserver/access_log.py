"""
=============================================================================
ACCESS LOG
=============================================================================

One log line per request, on its own logger so it can be routed or
silenced independently of the server's lifecycle messages:

    logging.getLogger("assetserver.access").setLevel(logging.WARNING)
    logging.getLogger("assetserver.access").addHandler(file_handler)

=============================================================================
FORMATS
=============================================================================

text (Apache-style, for humans):

    127.0.0.1 - - [19/Oct/2026:16:04:00 +0000] "/robots.txt" 200 24 - 0.41ms

json (for log aggregators):

    {"request_id": "3f2a9c1e", "client_ip": "127.0.0.1", "path": "/",
     "status_code": 200, "content_length": 812, "encoding": "gzip", ...}

=============================================================================
"""

import json
import logging
import time
from dataclasses import asdict, dataclass
from typing import Optional


logger = logging.getLogger("assetserver.access")


@dataclass
class AccessLog:
    """
    Structured log entry for one request.

    Attributes:
        request_id: Connection id, to correlate with debug logs.
        client_ip: Client's IP address.
        path: Request path as parsed (after defaulting to "/").
        status_code: Response status.
        content_length: Body bytes sent (after compression).
        encoding: Content-Encoding of the body, or None.
        duration_ms: Time from accept to response written.
        timestamp: When the request was logged.
    """

    request_id: str
    client_ip: str
    path: str
    status_code: int
    content_length: int
    encoding: Optional[str]
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        """Convert to a dictionary for JSON serialization."""
        entry = asdict(self)
        entry["status_code"] = int(self.status_code)
        entry["duration_ms"] = round(self.duration_ms, 2)
        return entry

    def to_text(self) -> str:
        """Format as an Apache-style access log line."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.path}" {int(self.status_code)} '
            f'{self.content_length} {self.encoding or "-"} {self.duration_ms:.2f}ms'
        )


def log_access(entry: AccessLog, log_format: str = "text", level: int = logging.INFO):
    """Emit an access log entry in the given format."""
    if not logger.isEnabledFor(level):
        return
    if log_format == "json":
        logger.log(level, json.dumps(entry.to_dict()))
    else:
        logger.log(level, entry.to_text())


def timestamp() -> str:
    """Current local time in access-log format."""
    return time.strftime("%d/%b/%Y:%H:%M:%S %z")
