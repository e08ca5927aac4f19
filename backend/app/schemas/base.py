from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Request bodies use the client's camelCase keys; snake_case is accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def iso(value) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    return value
