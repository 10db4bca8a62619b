"""Validators shared across resource schemas."""

from __future__ import annotations

from marshmallow import ValidationError


def not_blank(value: str) -> None:
    """Reject strings that are empty once surrounding whitespace is stripped."""

    if not value.strip():
        raise ValidationError("Must not be blank.")
