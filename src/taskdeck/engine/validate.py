# src/taskdeck/engine/validate.py

"""
Stored blob validation rules.

This module validates decoded task records against store-wide invariants
that per-record parsing cannot see.

Responsibilities:
- per-record structural problems (collected, not raised),
- id uniqueness across the list,
- creation-time title rule.

It does NOT read storage and does NOT repair anything.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Any, Sequence

from .parse import ParseError, parse_record


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ValidationError(Exception):
    """
    Fatal validation error used for command flow control.

    Raised when an operation must be aborted immediately
    (e.g. missing required user input, unknown task id).
    """


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """
    A single validation problem.

    `code` is a stable identifier suitable for tests and future filtering.
    """

    code: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Aggregated validation result for one stored blob.
    """

    path: str
    issues: Sequence[ValidationIssue]

    @property
    def ok(self) -> bool:
        return not self.issues


# ---------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------

def validate_records(records: Sequence[dict[str, Any]], *, path: str = "<blob>") -> ValidationResult:
    """
    Validate raw task mappings as decoded from a blob.
    """
    issues: list[ValidationIssue] = []
    ids: list[int] = []

    for i, rec in enumerate(records):
        try:
            task = parse_record(rec, path=f"{path}[{i}]")
        except ParseError as e:
            issues.append(ValidationIssue(code="record_invalid", message=str(e)))
            continue

        ids.append(task.id)

        if not task.title.strip():
            issues.append(
                ValidationIssue(
                    code="title_empty",
                    message=f"Task {task.id}: title is empty",
                )
            )

    for task_id, n in Counter(ids).items():
        if n > 1:
            issues.append(
                ValidationIssue(
                    code="id_duplicate",
                    message=f"Task id {task_id} appears {n} times",
                )
            )

    return ValidationResult(path=path, issues=tuple(issues))
