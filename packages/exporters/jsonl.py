# JSONL writer: one record per violation with the rule and level it mapped to.
import json
from typing import TextIO

from packages.schema.models import ViolationReport
from packages.schema.sarif import SarifDocument


def write_jsonl(handle: TextIO, report: ViolationReport, document: SarifDocument) -> int:
    results = document.runs[0].results if document.runs else []
    if len(results) != len(report.violations):
        raise ValueError(
            f"Document has {len(results)} results for {len(report.violations)} violations"
        )

    for violation, result in zip(report.violations, results):
        rec = {
            "violation": violation.model_dump(),
            "ruleId": result.ruleId,
            "level": result.level,
        }
        handle.write(json.dumps(rec, ensure_ascii=False) + "\n")
    return len(results)
