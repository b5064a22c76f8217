"""Configuration for VisibilityResolver."""

from typing import Any, Self

from pydantic import BaseModel, Field, ValidationError, field_validator

from ruby_visibility.errors import ResolverConfigError

_DEFAULT_SCOPE_BLOCK_CALLS = ["concerning", "class_methods"]
_DEFAULT_TYPE_CONSTRUCTOR_CALLS = [
    "Class.new",
    "Module.new",
    "Struct.new",
    "Data.define",
]


class ResolverConfig(BaseModel):
    """Configuration for VisibilityResolver with Pydantic validation.

    Only the classifier and the file front end are configurable; resolution
    itself has no knobs.
    """

    scope_block_calls: list[str] = Field(
        default_factory=lambda: list(_DEFAULT_SCOPE_BLOCK_CALLS),
        description=(
            "Receiverless calls whose block keeps its own visibility "
            "bookkeeping (e.g. ActiveSupport 'concerning')"
        ),
    )
    type_constructor_calls: list[str] = Field(
        default_factory=lambda: list(_DEFAULT_TYPE_CONSTRUCTOR_CALLS),
        description="'Receiver.method' calls whose block is a new type body",
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Refuse files larger than this size in bytes",
        gt=0,
    )
    encoding: str = Field(default="utf-8", description="Source file encoding")

    @field_validator("scope_block_calls")
    @classmethod
    def validate_scope_block_calls(cls, v: list[str]) -> list[str]:
        """Strip names and reject empty or dotted ones."""
        names = [name.strip() for name in v]
        for name in names:
            if not name or "." in name:
                raise ValueError(f"Invalid scope block call name: {name!r}")
        return names

    @field_validator("type_constructor_calls")
    @classmethod
    def validate_type_constructor_calls(cls, v: list[str]) -> list[str]:
        """Require the 'Receiver.method' shape."""
        names = [name.strip() for name in v]
        for name in names:
            receiver, _, method = name.rpartition(".")
            if not receiver or not method:
                raise ValueError(
                    f"Type constructor must look like 'Receiver.method': {name!r}"
                )
        return names

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from a plain dictionary.

        Args:
            properties: Raw properties containing any of:
                - scope_block_calls (list[str], optional)
                - type_constructor_calls (list[str], optional)
                - max_file_size (int, optional)
                - encoding (str, optional)

        Returns:
            Validated configuration object

        Raises:
            ResolverConfigError: If validation fails

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise ResolverConfigError(
                f"Invalid visibility resolver configuration: {e}"
            ) from e
