"""Field operations emitted by the mapping engine and applied to the template."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterator, Union


@dataclass(frozen=True)
class SetText:
    value: str


@dataclass(frozen=True)
class SetChoice:
    value: str


@dataclass(frozen=True)
class Select:
    """Activate a checkbox or radio widget. Carries no payload."""


SELECT = Select()

Operation = Union[SetText, SetChoice, Select]


def operation_kind(operation: Operation) -> str:
    if isinstance(operation, SetText):
        return "set_text"
    if isinstance(operation, SetChoice):
        return "set_choice"
    return "select"


class DuplicateFieldError(ValueError):
    """Raised when two rules target the same template field in one pass."""


class FieldMapping:
    """Ordered template-field-name to operation pairs, one per field."""

    def __init__(self) -> None:
        self._operations: dict[str, Operation] = {}

    def add(self, field_name: str, operation: Operation) -> None:
        if field_name in self._operations:
            raise DuplicateFieldError(f"Field already mapped: {field_name}")
        self._operations[field_name] = operation

    def get(self, field_name: str) -> Operation | None:
        return self._operations.get(field_name)

    def items(self) -> list[tuple[str, Operation]]:
        return list(self._operations.items())

    def __iter__(self) -> Iterator[str]:
        return iter(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __contains__(self, field_name: object) -> bool:
        return field_name in self._operations

    def as_list(self) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        for field_name, operation in self._operations.items():
            row: dict[str, Any] = {
                "field_name": field_name,
                "operation": operation_kind(operation),
            }
            if isinstance(operation, (SetText, SetChoice)):
                row["value"] = operation.value
            rows.append(row)
        return rows

    def to_json(self) -> str:
        return json.dumps(self.as_list(), ensure_ascii=False, separators=(",", ":"))
