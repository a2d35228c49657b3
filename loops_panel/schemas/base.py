from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Schema exchanged with the dashboard in camelCase (``accountId``)."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
