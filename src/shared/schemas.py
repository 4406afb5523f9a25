"""Base Pydantic schema for the portal's camelCase JSON wire format."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts both snake_case and camelCase input, dumps camelCase by alias."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")
