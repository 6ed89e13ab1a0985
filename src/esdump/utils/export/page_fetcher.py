"""
Page fetcher for point-in-time searches.

Issues one ``search_after`` request against a snapshot and turns the
answer into a ``Page``, an ``IndexFailure`` or a ``Fatal`` outcome.
"""

from typing import Any, Dict, List, Optional

from esdump.constants import SHARD_DOC_SORT
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
    Document,
    Fatal,
    IndexFailure,
    Outcome,
    Page,
    Success,
    decode_response,
    load_json_or_none,
    parse_error_envelope,
)


def build_search_body(
    token: str, keep_alive: str, batch_size: int, cursor: Optional[Any] = None
) -> Dict[str, Any]:
    """
    Search request for the next page of a snapshot.

    ``search_after`` is only present once a cursor exists.
    """
    body = {
        "size": batch_size,
        "pit": {"id": token, "keep_alive": keep_alive},
        "query": {"match_all": {}},
        "sort": SHARD_DOC_SORT,
    }
    if cursor is not None:
        body["search_after"] = [cursor]
    return body


def _is_hit(hit: Any) -> bool:
    return (
        isinstance(hit, dict)
        and "_source" in hit
        and isinstance(hit.get("sort"), list)
    )


def is_search_result(payload: Any) -> bool:
    """Success shape: ``{"pit_id": str, "hits": {"hits": [hit, ...]}}``"""
    if not isinstance(payload, dict) or not isinstance(payload.get("pit_id"), str):
        return False
    hits = payload.get("hits")
    if not isinstance(hits, dict) or not isinstance(hits.get("hits"), list):
        return False
    return all(_is_hit(hit) for hit in hits["hits"])


def to_page(payload: Dict[str, Any]) -> Page:
    documents: List[Document] = [
        Document(source=hit["_source"], sort=hit["sort"])
        for hit in payload["hits"]["hits"]
    ]
    return Page(documents=documents, pit_id=payload["pit_id"])


class PageFetcher:
    """Fetches pages of one snapshot through a transport"""

    def __init__(self, transport: SearchTransport, max_body_size: Optional[int] = None):
        self.transport = transport
        self.max_body_size = max_body_size or LogConfig().max_payload_size
        self.logger = get_logger("esdump.utils.export.page_fetcher")

    def fetch(
        self,
        index: str,
        token: str,
        keep_alive: str,
        batch_size: int,
        cursor: Optional[Any] = None,
        request_timeout: Optional[float] = None,
    ) -> Outcome:
        """
        Fetch the page after ``cursor``.

        Returns:
            Success(Page) (an empty page ends the index), IndexFailure for
            backend errors or unreadable bodies, Fatal when the backend is
            unreachable
        """
        body = build_search_body(token, keep_alive, batch_size, cursor)

        try:
            response = self.transport.search(body, timeout=request_timeout, index=index)
        except TransportFailure as e:
            return Fatal(detail=f"Search failed for '{index}': {e}", cause=e)

        raw = truncate_payload(response.body, self.max_body_size)

        if not response.ok:
            envelope = parse_error_envelope(load_json_or_none(response.body))
            if envelope is not None:
                return IndexFailure(
                    index=index,
                    detail=envelope.describe(),
                    kind=APPLICATION_ERROR,
                    status=response.status,
                    body=raw,
                )
            return IndexFailure(
                index=index,
                detail="search request rejected",
                kind=HTTP_STATUS,
                status=response.status,
                body=raw,
            )

        decoded = decode_response(response.body, is_search_result)

        if isinstance(decoded, DecodedApplicationError):
            return IndexFailure(
                index=index,
                detail=decoded.describe(),
                kind=APPLICATION_ERROR,
                status=decoded.status or response.status,
                body=raw,
            )
        if isinstance(decoded, DecodedMalformed):
            self.logger.debug(f"Unparseable search response for '{index}': {raw}")
            return IndexFailure(
                index=index,
                detail=f"malformed search response ({decoded.reason})",
                kind=MALFORMED,
                status=response.status,
                body=raw,
            )

        page = to_page(decoded.payload)
        self.logger.debug(
            f"Fetched {len(page)} documents from '{index}' (search_after={cursor})"
        )
        return Success(page)
