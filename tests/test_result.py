import io

from byexample.hit.result import Result


def test_zero_value_is_empty_summary():
    r = Result()
    assert (r.requests, r.errors, r.bytes, r.fastest, r.slowest) == (0, 0, 0, 0.0, 0.0)
    assert r.error is None


def test_merge_counts_requests_bytes_and_extremes():
    r = (
        Result()
        .merge(Result(duration=0.5, bytes=10, status=200))
        .merge(Result(duration=0.2, bytes=5, status=200))
        .merge(Result(duration=0.3, bytes=0, status=200))
    )
    assert r.requests == 3
    assert r.bytes == 15
    assert r.fastest == 0.2
    assert r.slowest == 0.5
    assert r.errors == 0


def test_merge_counts_bad_status_as_error():
    r = Result().merge(Result(duration=0.1, status=500))
    assert r.errors == 1
    assert r.requests == 1


def test_merge_counts_exception_as_error():
    r = Result().merge(Result(duration=0.1, status=200, error=ValueError("boom")))
    assert r.errors == 1


def test_merge_does_not_change_original():
    original = Result()
    merged = original.merge(Result(duration=0.1, status=200))
    assert original.requests == 0
    assert merged.requests == 1


def test_finalize_sets_duration_and_rps():
    r = Result(requests=4).finalize(2.0)
    assert r.duration == 2.0
    assert r.rps * 2.0 == 4


def test_success_rate_bounds():
    assert Result(requests=4, errors=0).success_rate() == 100.0
    assert Result(requests=4, errors=4).success_rate() == 0.0
    half = Result(requests=4, errors=2).success_rate()
    assert Result(requests=4, errors=1).success_rate() > half


def test_fprint_summary_lines():
    r = Result(requests=3, errors=1, bytes=42).finalize(2.0)
    out = io.StringIO()
    r.fprint(out)
    text = out.getvalue()
    assert text.startswith("\nSummary:\n")
    assert "\tRequests   : 3\n" in text
    assert "\tErrors     : 1\n" in text
    assert "\tBytes      : 42\n" in text
    assert "\tDuration   : 2s\n" in text
    assert "Fastest" in text
    assert "Slowest" in text


def test_fprint_omits_extremes_for_single_request():
    text = str(Result().merge(Result(duration=0.1, status=200)).finalize(1.0))
    assert "Fastest" not in text
    assert "Slowest" not in text
    assert "\tRequests   : 1\n" in text


def test_str_matches_fprint():
    r = Result(requests=2, bytes=7).finalize(1.0)
    out = io.StringIO()
    r.fprint(out)
    assert str(r) == out.getvalue()