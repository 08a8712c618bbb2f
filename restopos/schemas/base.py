"""
Schemas Pydantic de base pour restopos
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Schema d'entree: champs inconnus rejetes"""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="forbid",
    )


class ResponseSchema(BaseModel):
    """Schema de sortie construit depuis les objets ORM / dataclasses"""

    model_config = ConfigDict(from_attributes=True)


class TimestampSchema(ResponseSchema):
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
