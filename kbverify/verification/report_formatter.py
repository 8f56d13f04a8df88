# kbverify/verification/report_formatter.py
# Human-readable rendering of an AggregateReport.
#
# Output is for people, not a stable machine-parseable schema. Use
# ReportSerializer for a machine-readable run record.
#
# Standard import pattern:
#   from kbverify.verification.report_formatter import format_report

from kbverify.verification.data_models.comparison_report import AggregateReport


def format_report(report: AggregateReport, operator: str = "mulhs") -> str:
    """
    Render the summary block for one bit width.

    Lines: bit width, total abstract values, the four verdict counts and
    the two average latencies. A truncated run adds the pairs evaluated and
    the reason it stopped.
    """
    lines = [
        "Testing %s transfer functions for bit width = %d" % (operator, report.bit_width),
        "Total abstract values: %d" % report.total_abstract_values,
        "Candidate transfer function more precise: %d" % report.candidate_more_precise,
        "Reference transfer function more precise: %d" % report.reference_more_precise,
        "Same precision for both transfer functions: %d" % report.equal_precision,
        "Unsound results: %d" % report.unsound,
        "Average candidate time: %.1f ns" % report.average_candidate_ns,
        "Average reference time: %.1f ns" % report.average_reference_ns,
    ]
    if report.truncated:
        lines.append(
            "Truncated: %d of %d pairs evaluated (%s)"
            % (report.pairs_evaluated, report.pairs_expected, report.truncation_reason)
        )
    return "\n".join(lines)
