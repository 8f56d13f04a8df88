# kbverify/verification/storage/report_serializer.py
# ReportSerializer -- writes an AggregateReport to a JSON run record.
#
# File name format: {run_id}_W{bit_width}_{PASS|UNSOUND|TRUNCATED}_{timestamp}.json
# The runs directory is created if it does not exist.
# Average latencies are serialized as float.hex() so the record is lossless.

import json
from datetime import datetime, timezone
from pathlib import Path

from kbverify.verification.data_models.comparison_report import AggregateReport
from kbverify.verification.harness_version import (
    HARNESS_VERSION,
    OPERATOR_NAME,
    STORAGE_FORMAT_VERSION,
)


def _status(report: AggregateReport) -> str:
    if report.truncated:
        return "TRUNCATED"
    if report.unsound:
        return "UNSOUND"
    return "PASS"


def report_to_dict(report: AggregateReport) -> dict:
    return {
        "bit_width":              report.bit_width,
        "total_abstract_values":  report.total_abstract_values,
        "pairs_expected":         report.pairs_expected,
        "pairs_evaluated":        report.pairs_evaluated,
        "reference_more_precise": report.reference_more_precise,
        "candidate_more_precise": report.candidate_more_precise,
        "equal_precision":        report.equal_precision,
        "unsound":                report.unsound,
        "average_candidate_ns":   float(report.average_candidate_ns).hex(),
        "average_reference_ns":   float(report.average_reference_ns).hex(),
        "truncated":              report.truncated,
        "truncation_reason":      report.truncation_reason,
    }


class ReportSerializer:
    """
    Serializes one AggregateReport, stamped with harness metadata, to a JSON
    file in runs_dir.
    """

    def serialize(
        self,
        report:         AggregateReport,
        runs_dir:       Path,
        run_id:         str,
        candidate_name: str,
    ) -> Path:
        """
        Write the record and return the path of the written file.
        """
        runs_dir.mkdir(parents=True, exist_ok=True)

        status   = _status(report)
        ts       = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        filename = f"{run_id}_W{report.bit_width}_{status}_{ts}.json"
        filepath = runs_dir / filename

        payload = {
            "format_version":  STORAGE_FORMAT_VERSION,
            "harness_version": HARNESS_VERSION,
            "operator":        OPERATOR_NAME,
            "candidate":       candidate_name,
            "run_id":          run_id,
            "result":          status,
            "report":          report_to_dict(report),
        }

        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)

        return filepath
