"""
Point-in-time snapshot handling.

Opening a snapshot gives a token that pins a consistent view of one index
for as long as it is kept alive. Every search response hands back a
rotated token that must replace the previous one.
"""

from typing import Any, Optional

from esdump.errors import TransportFailure
from esdump.logging import get_logger
from esdump.logging.config import LogConfig
from esdump.logging.utils import truncate_payload
from esdump.utils.transport import SearchTransport
from .results import (
    APPLICATION_ERROR,
    HTTP_STATUS,
    MALFORMED,
    DecodedApplicationError,
    DecodedMalformed,
    Fatal,
    IndexFailure,
    Outcome,
    Success,
    decode_response,
    load_json_or_none,
    parse_error_envelope,
)


def is_pit_response(payload: Any) -> bool:
    return (
        isinstance(payload, dict)
        and isinstance(payload.get("id"), str)
        and bool(payload["id"])
    )


class SnapshotSession:
    """Opens and releases point-in-time snapshots through a transport"""

    def __init__(self, transport: SearchTransport, max_body_size: Optional[int] = None):
        self.transport = transport
        self.max_body_size = max_body_size or LogConfig().max_payload_size
        self.logger = get_logger("esdump.utils.export.snapshot")

    def open(
        self, index: str, keep_alive: str, request_timeout: Optional[float] = None
    ) -> Outcome:
        """
        Open a snapshot on ``index``.

        Returns:
            Success(token), IndexFailure when the backend refuses, or Fatal
            when the backend cannot be reached
        """
        try:
            response = self.transport.open_point_in_time(
                index, keep_alive, timeout=request_timeout
            )
        except TransportFailure as e:
            return Fatal(detail=f"Cannot open snapshot on '{index}': {e}", cause=e)

        body = truncate_payload(response.body, self.max_body_size)

        if not response.ok:
            envelope = parse_error_envelope(load_json_or_none(response.body))
            detail = (
                envelope.describe() if envelope
                else "snapshot could not be opened"
            )
            return IndexFailure(
                index=index,
                detail=detail,
                kind=HTTP_STATUS,
                status=response.status,
                body=body,
            )

        decoded = decode_response(response.body, is_pit_response)

        if isinstance(decoded, DecodedApplicationError):
            return IndexFailure(
                index=index,
                detail=decoded.describe(),
                kind=APPLICATION_ERROR,
                status=decoded.status or response.status,
                body=body,
            )
        if isinstance(decoded, DecodedMalformed):
            return IndexFailure(
                index=index,
                detail=f"malformed snapshot response ({decoded.reason})",
                kind=MALFORMED,
                status=response.status,
                body=body,
            )

        self.logger.debug(f"Opened snapshot on '{index}' (keep_alive={keep_alive})")
        return Success(decoded.payload["id"])

    def release(
        self, token: str, index: Optional[str] = None, request_timeout: Optional[float] = None
    ) -> bool:
        """
        Close a snapshot before its keep-alive expires.

        Failure only costs backend resources until expiry, so it is logged
        and reported as False.
        """
        try:
            response = self.transport.close_point_in_time(
                token, timeout=request_timeout, index=index
            )
        except TransportFailure as e:
            self.logger.warning(f"Could not release snapshot for '{index}': {e}")
            return False

        if not response.ok:
            self.logger.warning(
                f"Could not release snapshot for '{index}': status {response.status}"
            )
            return False
        return True
