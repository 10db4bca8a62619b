"""User-facing Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .common import not_blank


class UserSchema(Schema):
    """Serialized public representation of a user."""

    id = fields.Integer(dump_only=True)
    email = fields.Email(required=True)
    name = fields.String(required=True)
    weight = fields.Float(allow_none=True)
    daily_caffeine_limit = fields.Integer(allow_none=True)


class UserUpdateSchema(Schema):
    """Partial profile update. Omitted or ``null`` fields stay unchanged."""

    email = fields.Email(allow_none=True, validate=validate.Length(max=254))
    name = fields.String(allow_none=True, validate=[not_blank, validate.Length(max=100)])
    weight = fields.Float(allow_none=True, validate=validate.Range(min=0, min_inclusive=False))
    daily_caffeine_limit = fields.Integer(allow_none=True, validate=validate.Range(min=0))
