"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps one accepted client socket for exactly one request/response cycle.

=============================================================================
CONNECTION LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     ONE CONNECTION, ONE REQUEST                     │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   ACCEPTED ──► READ ──► ROUTED ──┬──► RESPONDED ──┐                 │
    │                  │               │                 ├──► CLOSED      │
    │                  │               └──► REJECTED ────┘                 │
    │                  │                     (404)                         │
    │                  └── read error / garbage: path defaults to "/"     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

No keep-alive: after one response the socket is closed, whatever the
client asked for.

=============================================================================
ONE BOUNDED READ
=============================================================================

We call recv() ONCE with a fixed buffer (2048 bytes by default). TCP may
deliver a request in several segments, but the request line is tiny
and virtually always arrives in the first one. Headers and bodies we
don't need are simply never read.

=============================================================================
BEST-EFFORT WRITE
=============================================================================

If the client has gone away while we were working, sendall() raises
BrokenPipeError or ConnectionResetError. There is nobody left to tell,
so we log at DEBUG, report False, and let the caller close the socket.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..http.request import READ_SIZE


logger = logging.getLogger(__name__)

# Most unread request bytes discarded before close
DRAIN_LIMIT = 64 * 1024


class ConnectionState(Enum):
    """Where a connection is in its single request/response cycle."""

    ACCEPTED = "accepted"      # Just accepted, nothing read yet
    READ = "read"              # Request bytes read (possibly none)
    ROUTED = "routed"          # Path matched a route
    RESPONDED = "responded"    # 200 response written
    REJECTED = "rejected"      # 404 response written
    CLOSED = "closed"          # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Short connection identifier for logs.
        state: Current ConnectionState.
        created_at: Timestamp when connection was accepted.
        read_size: Bytes to read for the request.
        timeout: Socket timeout in seconds, None for blocking.
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.ACCEPTED
    created_at: float = field(default_factory=time.time)

    read_size: int = READ_SIZE
    timeout: Optional[float] = None

    def __post_init__(self):
        # Accepted sockets can inherit the listener's accept timeout
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def age(self) -> float:
        """Get connection age in seconds."""
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> bytes:
        """
        Read the request with a single bounded recv().

        Returns:
            Up to read_size bytes. Empty bytes if the client sent
            nothing, closed early, or the read failed.
        """
        try:
            data = self.socket.recv(self.read_size)
        except OSError as e:
            # Includes socket.timeout and ConnectionResetError
            logger.debug(f"[{self.id}] Read failed: {e}")
            data = b""

        self.state = ConnectionState.READ
        return data

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """
        Send the full response.

        Uses sendall() so a large body is not cut short by a full
        kernel buffer.

        Returns:
            True if every byte was handed to the kernel, False if the
            client went away.
        """
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.debug(f"[{self.id}] Send failed: {e}")
            return False

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection.

        1. shutdown(SHUT_WR): send FIN, the client sees end of response
        2. drain: discard whatever request bytes we never read
        3. close(): release the file descriptor

        Safe to call more than once.
        """
        if self.state == ConnectionState.CLOSED:
            return

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected

        try:
            # Unread request bytes would make close() send RST instead
            # of FIN, and the client could lose the response.
            self.socket.settimeout(0.5)
            for _ in range(DRAIN_LIMIT // 1024):
                if not self.socket.recv(1024):
                    break
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.age * 1000:.2f}ms")

    def __enter__(self):
        """
        Context manager entry.

            with conn:
                raw = conn.read_request()
                conn.send_response(response)
            # Connection closed here, even on exceptions
        """
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
