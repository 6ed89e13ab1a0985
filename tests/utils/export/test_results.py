from esdump.utils.export.results import (
    DecodedApplicationError,
    DecodedMalformed,
    DecodedSuccess,
    IndexFailure,
    decode_response,
    load_json_or_none,
    parse_error_envelope,
)


def _has_id(payload):
    return isinstance(payload, dict) and "id" in payload


def test_decode_success_shape_first():
    decoded = decode_response('{"id": "abc"}', _has_id)

    assert isinstance(decoded, DecodedSuccess)
    assert decoded.payload == {"id": "abc"}


def test_decode_error_envelope_object():
    raw = (
        '{"error": {"root_cause": [], "type": "index_not_found_exception",'
        ' "reason": "no such index [x]"}, "status": 404}'
    )

    decoded = decode_response(raw, _has_id)

    assert isinstance(decoded, DecodedApplicationError)
    assert decoded.error_type == "index_not_found_exception"
    assert decoded.reason == "no such index [x]"
    assert decoded.status == 404
    assert decoded.describe() == "index_not_found_exception: no such index [x]"


def test_decode_error_envelope_string():
    decoded = decode_response('{"error": "boom", "status": 500}', _has_id)

    assert isinstance(decoded, DecodedApplicationError)
    assert decoded.describe() == "boom"


def test_error_reason_falls_back_to_root_cause():
    envelope = parse_error_envelope(
        {"error": {"type": "t", "root_cause": [{"reason": "from root"}]}}
    )

    assert envelope.reason == "from root"


def test_decode_malformed_shape():
    decoded = decode_response('{"something": "else"}', _has_id)

    assert isinstance(decoded, DecodedMalformed)
    assert decoded.raw == '{"something": "else"}'


def test_decode_invalid_json():
    decoded = decode_response("<html>gateway</html>", _has_id)

    assert isinstance(decoded, DecodedMalformed)
    assert "invalid JSON" in decoded.reason


def test_parse_error_envelope_rejects_other_shapes():
    assert parse_error_envelope(None) is None
    assert parse_error_envelope([1]) is None
    assert parse_error_envelope({"error": 12}) is None


def test_load_json_or_none():
    assert load_json_or_none('{"a": 1}') == {"a": 1}
    assert load_json_or_none("nope") is None
    assert load_json_or_none(None) is None


def test_index_failure_describe():
    failure = IndexFailure(index="a", detail="gone", kind="http_status", status=404)

    assert failure.describe() == "index 'a': gone, status 404"
