"""
Pydantic models for cars and the brand/model/generation catalog.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class BrandRead(BaseModel):
    id: int
    name: str = Field(..., examples=["Toyota"])


class ModelRead(BaseModel):
    id: int
    name: str = Field(..., examples=["Corolla"])
    brand_id: int


class GenerationRead(BaseModel):
    id: int
    name: str = Field(..., examples=["E210"])
    model_id: int
    year_start: Optional[int] = Field(None, examples=[2018])
    year_end: Optional[int] = Field(None, description="Empty while the generation is in production")


class CreateCarRead(BaseModel):
    """Reference lists used to fill in the new car form."""

    brands: List[BrandRead]
    models: List[ModelRead]
    generations: List[GenerationRead]


class CarStoreRequest(BaseModel):
    """Schema for adding a car to the caller's profile."""

    model_config = {"str_strip_whitespace": True}

    name: str = Field(..., examples=["My Corolla"])
    plate: str = Field(..., examples=["А123ВС77"])
    vin: str = Field(..., examples=["JTDBR32E720123456"])
    generation_id: int

    @field_validator("vin")
    @classmethod
    def normalise_vin(cls, v: str) -> str:
        return v.upper()


class CarUpdateRequest(BaseModel):
    """Schema for a partial car update.

    Only fields that were sent are written; see
    ``model_dump(exclude_unset=True)`` in ``CarService``.
    """

    model_config = {"str_strip_whitespace": True}

    name: Optional[str] = None
    plate: Optional[str] = None
    vin: Optional[str] = None
    generation_id: Optional[int] = None

    @field_validator("vin")
    @classmethod
    def normalise_vin(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v is not None else None


class CarProfileRead(BaseModel):
    """A car as shown in its owner's profile."""

    id: int
    name: str
    plate: str
    vin: str
    generation_id: int
    generation: str
    model: str
    brand: str
    year_start: Optional[int] = None
    year_end: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
