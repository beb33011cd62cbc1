from __future__ import annotations

from typing import Container, Sized


class ValidationError(ValueError):
    """Raised when startup preconditions are violated."""


def validate_outline_count(outlines: Sized) -> None:
    if len(outlines) == 0:
        raise ValidationError("At least one outline is required.")


def validate_step(step_deg: float) -> None:
    try:
        step = float(step_deg)
    except (TypeError, ValueError) as exc:
        raise ValidationError("Rotation step must be a number of degrees.") from exc
    if not 0.0 < step < 90.0:
        raise ValidationError(f"Rotation step must be in (0, 90) degrees, got {step_deg}.")


def validate_start_pair(table: Container[tuple[int, int]], rotate_from: int, rotate_to: int) -> None:
    if (rotate_from, rotate_to) not in table:
        raise ValidationError(f"Start pair ({rotate_from}, {rotate_to}) is not in the pair table.")
