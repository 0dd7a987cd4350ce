"""Helpers for reporting payload validation failures consistently."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, ValidationError


class ValidationResult(BaseModel):
    """Body returned to callers when a payload fails validation."""

    status: Literal["needs_review"] = "needs_review"
    message: str
    details: List[Dict[str, Any]]


def validation_failure(message: str, exc: ValidationError) -> Dict[str, Any]:
    """Translate Pydantic errors into a JSON-safe review payload."""

    details = json.loads(exc.json(include_url=False))
    return ValidationResult(message=message, details=details).model_dump()


__all__ = ["ValidationResult", "validation_failure"]
