
import io
import json

import pytest

from packages.exporters.jsonl import write_jsonl
from packages.exporters.sarif import translate
from packages.schema.models import Violation, ViolationReport


def _dummy_violation(**overrides) -> Violation:
    data = {
        "filename": "lib/Foo.pm",
        "line_number": 3,
        "column_number": 1,
        "severity": 4,
        "policy": "Perl::Critic::Policy::Foo",
        "description": "naïve code",
    }
    data.update(overrides)
    return Violation(**data)


def test_one_record_per_violation():
    report = ViolationReport(
        perl_critic_version="1.50",
        violations=[_dummy_violation(), _dummy_violation(severity=1, policy="P::Bar")],
    )
    handle = io.StringIO()

    written = write_jsonl(handle, report, translate(report))

    lines = handle.getvalue().splitlines()
    assert written == len(lines) == 2
    first, second = (json.loads(line) for line in lines)
    assert first["ruleId"] == "Perl::Critic::Policy::Foo"
    assert first["level"] == "warning"
    assert first["violation"]["line_number"] == 3
    assert second == {**second, "ruleId": "P::Bar", "level": "none"}
    assert "naïve" in handle.getvalue()


def test_mismatched_document_is_rejected():
    report = ViolationReport(perl_critic_version="1.50", violations=[_dummy_violation()])
    empty = translate(ViolationReport(perl_critic_version="1.50", violations=[]))
    with pytest.raises(ValueError):
        write_jsonl(io.StringIO(), report, empty)
