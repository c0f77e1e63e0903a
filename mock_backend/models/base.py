"""Base model for backend payloads"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class BackendModel(BaseModel):
    """Snake-case fields on the Python side, camelCase on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
