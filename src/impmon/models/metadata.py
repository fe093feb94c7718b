"""Subject metadata attached to exported reports."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Sex(str, Enum):
    """Subject sex as collected on the export form."""

    MALE = "Male"
    FEMALE = "Female"


class ExportMetadata(BaseModel):
    """
    Validated metadata record produced by the export form.

    Values are kept as the operator typed them; units are added by the
    exporter. ``last_menstruation`` only applies to female subjects and is
    dropped for anyone else.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="", description="Subject name")
    age: str = Field(default="", description="Age in years")
    sex: Sex = Field(description="Subject sex")
    weight: str = Field(default="", description="Weight (kg)")
    height: str = Field(default="", description="Height (m)")
    circumference: str = Field(
        default="", description="Suprailiac circumference (cm)"
    )
    last_menstruation: str | None = Field(
        default=None, description="Time since last menstruation (female only)"
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_menstruation_for_male(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("sex") not in (Sex.FEMALE, "Female"):
            data = {**data, "last_menstruation": None}
        return data
