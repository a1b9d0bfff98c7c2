import io

from driftwatch.report import DriftResult, FieldDiff, Reporter


def make_results():
    return [
        DriftResult(service_name="api", has_drift=False),
        DriftResult(
            service_name="worker",
            has_drift=True,
            diffs=[FieldDiff(field="replicas", expected=3, actual=1)],
        ),
    ]


def test_print_contains_service_names():
    buf = io.StringIO()
    Reporter(buf).print(make_results())
    out = buf.getvalue()
    assert "api" in out
    assert "worker" in out
    assert "[DRIFT]" in out
    assert "[OK]" in out


def test_print_line_format():
    buf = io.StringIO()
    Reporter(buf).print(make_results())
    lines = buf.getvalue().splitlines()
    assert lines[0] == "[OK]    api \u2014 no drift detected"
    assert lines[1] == "[DRIFT] worker \u2014 1 field(s) differ:"
    assert lines[2] == f"  {'replicas':<30} expected={'3':<20} actual=1"


def test_print_absent_value():
    buf = io.StringIO()
    Reporter(buf).print(
        [DriftResult(service_name="svc", has_drift=True, diffs=[FieldDiff(field="port", expected="80")])]
    )
    assert buf.getvalue().rstrip("\n").endswith("actual=<absent>")


def test_summary_with_drift():
    assert Reporter(io.StringIO()).summary(make_results()) == "1/2 service(s) have drift."


def test_summary_no_drift():
    summary = Reporter(io.StringIO()).summary([DriftResult(service_name="api", has_drift=False)])
    assert summary == "All 1 service(s) in sync."