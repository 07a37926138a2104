"""
Shared pydantic schema bases
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestModel(BaseModel):
    """Request body accepting both snake_case and camelCase keys"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement"""
    message: str
