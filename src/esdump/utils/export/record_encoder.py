"""
NDJSON bulk encoding.

Each document becomes an action line naming the target index followed by
the document body, both compact single-line JSON terminated by ``\\n``:

    {"index":{"_index":"logs"}}
    {"message":"hello"}
"""

import json
from typing import Any, Iterable, Tuple

from .results import Document

_SEPARATORS = (",", ":")


def _dumps(value: Any) -> bytes:
    text = json.dumps(value, separators=_SEPARATORS, ensure_ascii=False)
    try:
        return text.encode("utf-8")
    except UnicodeEncodeError:
        # lone surrogates cannot be written as UTF-8, keep them \u-escaped
        return json.dumps(value, separators=_SEPARATORS).encode("ascii")


class RecordEncoder:
    """Serializes documents into bulk ``index`` action/source line pairs"""

    @staticmethod
    def action_line(index: str) -> bytes:
        return _dumps({"index": {"_index": index}}) + b"\n"

    @staticmethod
    def encode(document: Any, index: str) -> Tuple[bytes, bytes]:
        """
        Encode one document body.

        Args:
            document: Document body (any JSON value)
            index: Target index for the bulk action

        Returns:
            (action_line, source_line), each newline-terminated UTF-8
        """
        return RecordEncoder.action_line(index), _dumps(document) + b"\n"

    @staticmethod
    def encode_page(documents: Iterable[Document], index: str) -> bytes:
        """Encode a page in order: two lines per document"""
        action = RecordEncoder.action_line(index)
        chunks = []
        for document in documents:
            chunks.append(action)
            chunks.append(_dumps(document.source) + b"\n")
        return b"".join(chunks)
