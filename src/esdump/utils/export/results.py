"""
Result variants returned at the export boundaries.

The backend answers HTTP 200 both for search results and for some
application errors, so response bodies are decoded by shape: success
first, then the error envelope, otherwise malformed. Callers receive
``Success``, ``IndexFailure`` or ``Fatal`` and only the export loop decides
what each one means for the run.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")

# IndexFailure kinds
HTTP_STATUS = "http_status"
APPLICATION_ERROR = "application_error"
MALFORMED = "malformed"
DATA_ANOMALY = "data_anomaly"


@dataclass(frozen=True)
class Document:
    """One hit: the record body and the sort key it was returned with"""

    source: Any
    sort: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class Page:
    """Ordered hits of one search request plus the rotated snapshot token"""

    documents: List[Document]
    pit_id: str

    @property
    def is_empty(self) -> bool:
        return not self.documents

    def __len__(self) -> int:
        return len(self.documents)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class IndexFailure:
    """A failure confined to one index; the run goes on"""

    index: str
    detail: str
    kind: str
    status: Optional[int] = None
    body: Optional[str] = None

    def describe(self) -> str:
        parts = [f"index '{self.index}': {self.detail}"]
        if self.status is not None:
            parts.append(f"status {self.status}")
        return ", ".join(parts)


@dataclass(frozen=True)
class Fatal:
    """A failure that makes the whole run impossible"""

    detail: str
    cause: Optional[BaseException] = None


Outcome = Union[Success, IndexFailure, Fatal]


@dataclass(frozen=True)
class DecodedSuccess:
    payload: Any


@dataclass(frozen=True)
class DecodedApplicationError:
    error_type: str
    reason: str
    status: Optional[int] = None

    def describe(self) -> str:
        if self.error_type and self.reason:
            return f"{self.error_type}: {self.reason}"
        return self.reason or self.error_type or "unknown error"


@dataclass(frozen=True)
class DecodedMalformed:
    raw: str
    reason: str


Decoded = Union[DecodedSuccess, DecodedApplicationError, DecodedMalformed]


def parse_error_envelope(payload: Any) -> Optional[DecodedApplicationError]:
    """
    Match the backend error envelope.

    Accepts ``{"error": {"type": ..., "reason": ...}, "status": 404}`` as
    well as the older ``{"error": "message", "status": 500}`` form.
    """
    if not isinstance(payload, dict) or "error" not in payload:
        return None

    status = payload.get("status")
    if not isinstance(status, int) or isinstance(status, bool):
        status = None

    err = payload["error"]
    if isinstance(err, str):
        return DecodedApplicationError(error_type="", reason=err, status=status)
    if isinstance(err, dict):
        root_causes = err.get("root_cause")
        reason = err.get("reason")
        if not reason and isinstance(root_causes, list) and root_causes:
            first = root_causes[0]
            reason = first.get("reason") if isinstance(first, dict) else None
        return DecodedApplicationError(
            error_type=str(err.get("type") or ""),
            reason=str(reason or ""),
            status=status,
        )
    return None


def decode_response(raw: str, success_check: Callable[[Any], bool]) -> Decoded:
    """
    Decode a response body by shape.

    Args:
        raw: Raw response text
        success_check: Returns True when the parsed JSON has the success shape

    Returns:
        DecodedSuccess, DecodedApplicationError or DecodedMalformed
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        return DecodedMalformed(raw=raw or "", reason=f"invalid JSON: {e}")

    if success_check(payload):
        return DecodedSuccess(payload=payload)

    envelope = parse_error_envelope(payload)
    if envelope is not None:
        return envelope

    return DecodedMalformed(raw=raw, reason="unexpected response shape")


def load_json_or_none(raw: str) -> Any:
    """Parsed JSON, or None when ``raw`` is not JSON"""
    try:
        return json.loads(raw)
    except (TypeError, ValueError):
        return None
