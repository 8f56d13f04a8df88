# kbverify/verification/failure_handler.py
# FailureHandler -- hard failure policy for the harness command line.
#
# On failure: build a FailureRecord, optionally write it as JSON to the runs
# directory, print a summary to stderr, and exit with the mapped code.
# If writing the record itself fails, the partial information goes to stderr
# and the process exits 4.
#
# Stdout is reserved for the comparison report.

import json
import logging
import sys
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import NoReturn, Optional

from kbverify.core.exceptions import KnownBitsError
from kbverify.verification.data_models.failure_record import (
    EXCEPTION_FAILURE_TYPES,
    FAILURE_TYPES,
    FailureRecord,
)
from kbverify.verification.harness_version import HARNESS_VERSION

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class FailureHandler:
    """
    Maps failure type ids to exit codes and terminates the process.

    Methods:
      handle(failure_type_id, detail)   -- does not return.
      handle_from_exception(exc)        -- does not return.
    """

    def __init__(
        self,
        run_id:    str,
        runs_dir:  Optional[Path] = None,
        bit_width: Optional[int] = None,
    ):
        self._run_id    = run_id
        self._runs_dir  = runs_dir
        self.bit_width  = bit_width

    def build_record(self, failure_type_id: str, detail: str) -> FailureRecord:
        return FailureRecord(
            failure_type_id=failure_type_id,
            exit_code=FAILURE_TYPES.get(failure_type_id, 4),
            bit_width=self.bit_width,
            detected_at_iso=_now_iso(),
            run_id=self._run_id,
            harness_version=HARNESS_VERSION,
            detail=detail,
        )

    def handle(self, failure_type_id: str, detail: str) -> NoReturn:
        """
        Execute the failure policy. This method does not return.
        """
        record = self.build_record(failure_type_id, detail)
        logger.error("%s: %s", failure_type_id, detail)

        try:
            written = self._write(record)
            sys.stderr.write(
                f"HARNESS RESULT: FAIL\n"
                f"Failure type:   {record.failure_type_id}\n"
                f"Exit code:      {record.exit_code}\n"
                f"Bit width:      {record.bit_width if record.bit_width is not None else '(not resolved)'}\n"
                f"Detail:         {detail[:200]}\n"
                + (f"Record written: {written}\n" if written is not None else "")
            )
        except OSError as exc:
            sys.stderr.write(
                f"HARNESS_INTERNAL_ERROR: FailureHandler failed to write record: {exc}\n"
                f"Original failure: {failure_type_id} -- {detail}\n"
            )
            sys.exit(4)

        sys.exit(record.exit_code)

    def handle_from_exception(self, exc: Exception) -> NoReturn:
        """
        Map a known-bits exception to its failure type and invoke handle().
        Any other exception is a HARNESS_INTERNAL_ERROR.
        """
        failure_type_id = "HARNESS_INTERNAL_ERROR"
        if isinstance(exc, KnownBitsError):
            failure_type_id = EXCEPTION_FAILURE_TYPES.get(
                type(exc).__name__, "HARNESS_INTERNAL_ERROR",
            )
        self.handle(failure_type_id, str(exc))

    def _write(self, record: FailureRecord) -> Optional[Path]:
        if self._runs_dir is None:
            return None
        self._runs_dir.mkdir(parents=True, exist_ok=True)
        ts_compact = record.detected_at_iso.replace(":", "").replace("-", "").replace("+", "Z")[:16]
        filepath = self._runs_dir / f"{self._run_id}_FAIL_{ts_compact}.json"
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(asdict(record), f, indent=4)
        return filepath
