"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server only ever answers with two statuses:

    200 OK          The asset was found, read and sent
    404 Not Found   Unknown path, OR a known path whose file is missing

From the client's point of view those two 404 causes are the same thing,
so we don't invent a separate status for "route exists, file doesn't".

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    Using IntEnum means the member IS an int:

        HTTPStatus.OK == 200        # True
        f"{HTTPStatus.NOT_FOUND}"   # "404"
    """

    OK = 200
    NOT_FOUND = 404

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES.get(self, "Unknown")

    def __str__(self) -> str:
        return str(self.value)


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
