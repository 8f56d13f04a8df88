from kbverify.core.domain import AbstractValue
from kbverify.verification.ci_gate import gate_failures, main
from kbverify.verification.data_models.comparison_report import AggregateReport


def _all_ones_candidate(lhs: AbstractValue, rhs: AbstractValue) -> AbstractValue:
    return AbstractValue.from_constant(lhs.bit_width, -1)


def _report(**overrides) -> AggregateReport:
    fields = dict(
        bit_width=1,
        total_abstract_values=3,
        pairs_expected=9,
        pairs_evaluated=9,
        reference_more_precise=3,
        candidate_more_precise=0,
        equal_precision=6,
        unsound=0,
        average_candidate_ns=1.0,
        average_reference_ns=1.0,
    )
    fields.update(overrides)
    return AggregateReport(**fields)


class TestGateFailures:

    def test_sound_complete_reports_pass(self) -> None:
        assert gate_failures([_report(), _report(bit_width=2)]) == []

    def test_unsound_report_blocks(self) -> None:
        failures = gate_failures([_report(unsound=2, equal_precision=4)])
        assert failures == ["W1 has 2 unsound pair(s)"]

    def test_truncated_report_blocks(self) -> None:
        report = _report(pairs_evaluated=4, truncated=True, truncation_reason="wall-clock budget exhausted")
        failures = gate_failures([report])
        assert len(failures) == 1
        assert "W1 truncated after 4 of 9 pairs" in failures[0]


class TestMain:

    def test_composite_passes_small_widths(self, capsys) -> None:
        assert main(bit_widths=(1, 2, 3)) == 0
        out = capsys.readouterr().out
        assert "CI-GATE: W3 " in out
        assert "result=PASS" in out

    def test_unsound_candidate_fails(self, capsys) -> None:
        assert main(candidate=_all_ones_candidate, bit_widths=(1,)) == 1
        assert "Merge BLOCKED" in capsys.readouterr().err

    def test_harness_error_fails(self, capsys) -> None:
        assert main(bit_widths=(40,)) == 1
        assert "CI-GATE ERROR: ImpracticalBitWidth" in capsys.readouterr().err
