from __future__ import annotations
from dataclasses import dataclass
from typing import AbstractSet, Any, List, Optional, Tuple

from task_tracker.domain.errors import TaskValidationError
from task_tracker.domain.task_models import TaskDraft, TaskStatus


@dataclass(frozen=True)
class FieldRule:
    field: str
    label: str
    required: bool = True
    max_length: Optional[int] = None
    choices: Optional[Tuple[str, ...]] = None
    choices_message: Optional[str] = None
    unreadable_message: Optional[str] = None


TASK_RULES: Tuple[FieldRule, ...] = (
    FieldRule("title", "Title", max_length=100),
    FieldRule("description", "Description", max_length=500),
    FieldRule(
        "status",
        "Status",
        required=False,
        choices=tuple(s.value for s in TaskStatus),
        choices_message="Status must be either TODO or DONE",
    ),
    FieldRule("deadline", "Deadline", unreadable_message="Deadline must be a valid date"),
)


def _check(rule: FieldRule, value: Any) -> Optional[str]:
    if value is None or value == "":
        return f"{rule.label} is required" if rule.required else None
    if rule.max_length is not None and isinstance(value, str) and len(value) > rule.max_length:
        return f"{rule.label} cannot exceed {rule.max_length} characters"
    if rule.choices is not None:
        raw = value.value if isinstance(value, TaskStatus) else value
        if raw not in rule.choices:
            return rule.choices_message or f"{rule.label} is not an allowed value"
    return None


def validate_task(
    draft: TaskDraft,
    unreadable: AbstractSet[str] = frozenset(),
    rules: Tuple[FieldRule, ...] = TASK_RULES,
) -> List[str]:
    """
    Return every rule violation for a record, in rule order.

    `unreadable` names fields whose raw input could not be converted at all
    (a deadline that is not a date); those report that instead of the usual
    checks.
    """
    violations: List[str] = []
    for rule in rules:
        if rule.field in unreadable:
            violations.append(rule.unreadable_message or f"{rule.label} is invalid")
            continue
        problem = _check(rule, getattr(draft, rule.field, None))
        if problem:
            violations.append(problem)
    return violations


def ensure_valid(draft: TaskDraft, unreadable: AbstractSet[str] = frozenset()) -> None:
    violations = validate_task(draft, unreadable)
    if violations:
        raise TaskValidationError(violations)
