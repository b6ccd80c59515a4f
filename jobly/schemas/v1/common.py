"""Shared request schema bases."""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator


class PatchRequest(BaseModel):
    """Body of a partial update.

    Fields left out of the body are not changed. An explicit null is accepted
    only for fields listed in `nullable_fields`.
    """

    model_config = ConfigDict(extra="forbid")

    nullable_fields: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_nulls_for_required_columns(self) -> "PatchRequest":
        for name in self.model_fields_set:
            if getattr(self, name) is None and name not in self.nullable_fields:
                raise ValueError(f"{name} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """The fields actually sent, in declaration order."""
        return self.model_dump(exclude_unset=True)
