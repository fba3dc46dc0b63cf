"""
Response channel handed to web app handlers.

Handlers that need full control over the response write to the
ResponseWriter directly and return DONE_RESPONSE; everything else is
written by the encoder. The buffered result becomes a Starlette Response.
"""

from __future__ import annotations

import logging

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

logger = logging.getLogger(__name__)

DEFAULT_STATUS_CODE = 200


class ResponseWriter:
    """Buffered status line, headers and body for a single request."""

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self.status_code: int | None = None
        self.header_writes = 0
        self.body_writes = 0
        self._chunks: list[bytes] = []

    @property
    def body(self) -> bytes:
        return b"".join(self._chunks)

    def write_header(self, status_code: int) -> None:
        """
        Record the response status code.

        Only the first call takes effect; later calls are logged and ignored.

        Args:
            status_code: HTTP status code
        """
        if self.status_code is not None:
            logger.warning(
                f"Superfluous write_header({status_code}), "
                f"status already {self.status_code}"
            )
            return
        self.status_code = status_code
        self.header_writes += 1

    def write(self, data: bytes | str) -> int:
        """
        Append data to the response body.

        Writes the default 200 status first if no status was written yet.

        Args:
            data: Body bytes (str is encoded as UTF-8)

        Returns:
            Number of bytes written
        """
        if self.status_code is None:
            self.write_header(DEFAULT_STATUS_CODE)
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._chunks.append(data)
        self.body_writes += 1
        return len(data)

    def to_response(self) -> Response:
        """Build the Starlette response from everything written so far."""
        status_code = self.status_code
        if status_code is None:
            status_code = DEFAULT_STATUS_CODE
        return Response(
            content=self.body,
            status_code=status_code,
            headers=self.headers,
        )
