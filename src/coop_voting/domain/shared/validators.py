"""Shared Pydantic validators for domain models and command payloads.

This module provides reusable validators for identifier fields and a helper
that turns Pydantic validation failures into domain ``ValidationError``s so
callers only ever see the domain error taxonomy.
"""

from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel, field_validator

from coop_voting.domain.shared.exceptions import ValidationError
from coop_voting.domain.shared.messages import ErrorMessages

M = TypeVar("M", bound=BaseModel)


def validate_non_empty_string(value: str, field_name: str = "value") -> str:
    """Validate that a string is not empty or whitespace-only.

    Args:
        value: The string to validate.
        field_name: Name of the field for error messages.

    Returns:
        The string with surrounding whitespace removed.

    Raises:
        ValueError: If the string is empty or whitespace-only.
    """
    if not value or not value.strip():
        raise ValueError(ErrorMessages.FIELD_CANNOT_BE_EMPTY.format(field_name=field_name))
    return value.strip()


def validate_model(model_cls: type[M], data: Any) -> M:
    """Validate ``data`` into ``model_cls``, raising the domain ValidationError.

    The first reported error names the offending field.
    """
    try:
        return model_cls.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", str(exc))
        if field:
            message = f"{field}: {message}"
        raise ValidationError(message, field=field) from exc


class IdentifierValidators:
    """Collection of Pydantic field validators for identifier fields.

    Example:
        >>> from pydantic import BaseModel
        >>> class MyCommand(BaseModel):
        ...     agenda_id: str
        ...     user_id: str
        ...
        ...     _validate_ids = IdentifierValidators.non_blank("agenda_id", "user_id")
    """

    @staticmethod
    def non_blank(*field_names: str) -> Any:
        """Create a field validator rejecting blank identifiers.

        Args:
            *field_names: Names of the fields to validate.

        Returns:
            A Pydantic field_validator decorator configured for all fields.
        """

        @field_validator(*field_names)
        @classmethod
        def validator(cls, v: str, info: Any) -> str:
            return validate_non_empty_string(v, info.field_name)

        return validator
