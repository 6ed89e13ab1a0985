from esdump.utils.export.cursor import CursorTracker, is_sort_anomaly, next_cursor
from esdump.utils.export.results import Document, Page


def _page(*sorts):
    return Page(
        documents=[Document(source={}, sort=list(sort)) for sort in sorts],
        pit_id="p",
    )


def test_next_cursor_is_first_sort_value_of_last_document():
    assert next_cursor(_page([1], [2], [42])) == 42


def test_next_cursor_passes_value_through_verbatim():
    assert next_cursor(_page([18446744073709551615, "tiebreak"])) == 18446744073709551615


def test_next_cursor_empty_page():
    assert next_cursor(_page()) is None


def test_next_cursor_missing_sort_key():
    assert next_cursor(_page([1], [])) is None


def test_sort_anomaly_detection():
    assert is_sort_anomaly(_page([1], [])) is True
    assert is_sort_anomaly(_page([1], [2])) is False
    assert is_sort_anomaly(_page()) is False


def test_tracker_records_requested_cursors():
    tracker = CursorTracker()

    assert tracker.mark_requested() is None
    tracker.advance(_page([1], [2]))
    assert tracker.mark_requested() == 2
    tracker.advance(_page([3]))
    assert tracker.mark_requested() == 3

    assert tracker.history == [None, 2, 3]
