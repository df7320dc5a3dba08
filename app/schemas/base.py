"""
Shared base for API schemas - snake_case in Python, camelCase on the wire
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class MessageResponse(CamelModel):
    """Plain acknowledgement, also the shape of every error body"""
    message: str
