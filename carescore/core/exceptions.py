"""
Error taxonomy for the scoring rules.

"No data" is never an error here: an absent vitals snapshot resolves to a
conservative default inside each rule. What is an error is a caller that
breaks the contract, for example leaving out one of the early warning
parameters. Substituting zero there would silently lower a clinical score, so
we fail fast instead.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


class CareScoreError(Exception):
    """Base class for everything this package raises on purpose."""


class CallerContractViolation(CareScoreError, ValueError):
    def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.fields = tuple(fields)


def validate_contract(model: type[ModelT], data: Mapping[str, Any], what: str) -> ModelT:
    """
    Build `model` from loose input, reporting failures as CallerContractViolation.

    The offending field names end up on the exception's `fields`.
    """
    try:
        return model.model_validate(dict(data))
    except ValidationError as exc:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in exc.errors()})
        raise CallerContractViolation(
            f"{what}: missing or invalid {', '.join(fields)}",
            fields=fields,
        ) from exc
