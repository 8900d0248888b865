"""Shared schema base — camelCase aliases on the wire."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts either field names or camelCase aliases; dumps camelCase."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
