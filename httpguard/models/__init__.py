"""Pydantic models for httpguard."""

from httpguard.models.errors import ErrorContext, ErrorDescription

__all__ = ["ErrorContext", "ErrorDescription"]
