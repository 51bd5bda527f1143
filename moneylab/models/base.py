"""Shared pydantic base for calculator value types."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ValueModel(BaseModel):
    """Immutable model serialized with the camelCase keys the front end uses.

    NaN and infinity are rejected; JSON bodies may carry them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )

    def to_json_dict(self) -> dict:
        """Dump to a JSON-ready dict keyed by aliases."""
        return self.model_dump(mode="json", by_alias=True)
