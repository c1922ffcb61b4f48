from markerscan.models import Finding, MarkerKind
from markerscan.results import NO_ISSUES_MESSAGE, aggregate, format_detail, summarize


def _finding(kind, source="src/a.py", line=1, column=1, annotation="note"):
    return Finding(
        source_id=source,
        line=line,
        column=column,
        kind=kind,
        annotation=annotation,
        raw_line=f"# {kind.value}: {annotation}",
    )


def _sample():
    return [
        _finding(MarkerKind.FIXME, line=3, annotation="first fixme"),
        _finding(MarkerKind.TODO, line=4, annotation="only todo"),
        _finding(MarkerKind.FIXME, source="src/b.py", line=1, column=7, annotation="second fixme"),
        _finding(MarkerKind.BUG, source="src/b.py", line=9, column=2, annotation="crash"),
    ]


def test_aggregate_of_nothing_is_no_issues():
    assert aggregate([]) is None
    assert summarize(None) == NO_ISSUES_MESSAGE
    assert format_detail(None) == NO_ISSUES_MESSAGE


def test_aggregate_groups_in_first_seen_order():
    findings = _sample()
    report = aggregate(findings)
    assert report.kinds() == [MarkerKind.FIXME, MarkerKind.TODO, MarkerKind.BUG]
    assert [f.annotation for f in report.findings(MarkerKind.FIXME)] == ["first fixme", "second fixme"]
    assert report.total == len(findings)
    grouped = [f for _, items in report.groups() for f in items]
    assert sorted(grouped, key=findings.index) == findings
    assert len(set(map(id, grouped))) == len(findings)


def test_summarize_lists_counts_in_first_seen_order():
    assert summarize(aggregate(_sample())) == "2 FIXME, 1 TODO, 1 BUG"


def test_format_detail_lists_every_location():
    findings = _sample()
    detail = format_detail(aggregate(findings))
    assert detail.startswith("Code Issues Report\n")
    assert "Total: 4 issues (2 FIXME, 1 TODO, 1 BUG)" in detail
    for f in findings:
        assert f"{f.source_id}:{f.line}:{f.column}" in detail
        assert f.raw_line in detail
        assert f"-> {f.annotation}" in detail
    assert detail.index("FIXME (2)") < detail.index("TODO (1)") < detail.index("BUG (1)")
    assert detail.rstrip().splitlines()[-1].startswith("Tip:")


def test_format_detail_uses_label_and_omits_empty_annotation():
    finding = _finding(MarkerKind.TODO, source="/work/repo/app.js", line=2, column=5, annotation="")
    detail = format_detail(aggregate([finding]), label=lambda source_id: source_id.replace("/work/repo/", ""))
    assert "app.js:2:5" in detail
    assert "/work/repo/app.js" not in detail
    assert "->" not in detail
    assert "Total: 1 issue (1 TODO)" in detail
