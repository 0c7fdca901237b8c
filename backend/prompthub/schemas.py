"""
Shared response/request building blocks.

The JSON API speaks camelCase; Python code stays snake_case. Models accept
either spelling on input and always emit camelCase.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class UserSummary(CamelModel):
    id: Optional[int] = None
    name: Optional[str] = None
    email: Optional[str] = None


class SuccessResponse(CamelModel):
    success: bool = True
