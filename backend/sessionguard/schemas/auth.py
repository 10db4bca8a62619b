"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .common import not_blank


class RegisterSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    name = fields.String(required=True, validate=[not_blank, validate.Length(max=100)])
    weight = fields.Float(load_default=None, validate=validate.Range(min=0, min_inclusive=False))
    daily_caffeine_limit = fields.Integer(load_default=None, validate=validate.Range(min=0))


class LoginSchema(Schema):
    """Input payload for authenticating a user."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    # no minimum: a short password is a failed login, not a malformed request
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class RefreshSchema(Schema):
    """Optional JSON body for clients that cannot send the refresh cookie."""

    refresh_token = fields.String(load_default=None)


class TokenResponseSchema(Schema):
    """Response payload containing a token pair."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.String(dump_default="bearer")
    expires_in = fields.Integer()
