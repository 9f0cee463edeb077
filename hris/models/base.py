import uuid
from datetime import datetime
from typing import ClassVar, Tuple

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel
from pytz import UTC


def new_id() -> str:
    return str(uuid.uuid4())


def now_iso() -> str:
    return datetime.now(UTC).isoformat()


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase on the wire and in the database file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class StrictModel(CamelModel):
    """Request bodies: unknown fields are rejected instead of merged."""

    model_config = ConfigDict(extra="forbid")


class PatchModel(StrictModel):
    """
    Partial-update bodies.

    Fields listed in ``non_nullable`` may be omitted but not sent as null.
    """

    non_nullable: ClassVar[Tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        nulled = [name for name in self.non_nullable if name in self.model_fields_set and getattr(self, name) is None]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self
