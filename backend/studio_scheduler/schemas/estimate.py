"""
Shapes of estimate documents as they arrive from the estimate authoring side.

Two generations of payload exist. Older estimates carry a flat ``services``
list and a flat ``deliverables`` list; newer ones carry ``packages`` (each with
its own services and deliverables) and record the client's choice in
``selectedPackageIndex``. Both are parsed into one of the variants below and
then normalized into a single ``NormalizedEstimate`` before conversion.
"""
from typing import Annotated, Any, Literal

from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, field_validator


def _as_text(value):
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# Counts and ids arrive as numbers or strings depending on the form that wrote them.
LooseText = Annotated[str | None, BeforeValidator(_as_text)]


def _as_list(value):
    return [] if value is None else value


def _text_lines(value):
    if value is None:
        return []
    if isinstance(value, list):
        return [line for line in value if isinstance(line, str)]
    return value


# Entries stay raw here and are validated one by one during conversion.
RawEntries = Annotated[list[Any], BeforeValidator(_as_list)]
TextLines = Annotated[list[str], BeforeValidator(_text_lines)]


class ServiceEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    event: str | None = None
    date: str | None = None
    start_time: str | None = Field(default=None, alias="startTime")
    end_time: str | None = Field(default=None, alias="endTime")
    location: str | None = None
    guests: LooseText = None
    photographers: LooseText = None
    videographers: LooseText = Field(
        default=None,
        validation_alias=AliasChoices("cinematographers", "videographers"),
    )


class EstimatePackage(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    services: RawEntries = []
    deliverables: TextLines = []


class _EstimateBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: LooseText = None
    status: str | None = None
    client_name: str = Field(default="", alias="clientName")
    client_phone: str = Field(default="", alias="clientPhone")
    client_email: str | None = Field(default=None, alias="clientEmail")
    # Legacy flat fields; packaged estimates may still carry deliverables here.
    services: RawEntries = []
    deliverables: TextLines = []

    @field_validator("client_name", "client_phone", mode="before")
    @classmethod
    def _blank_if_missing(cls, value):
        return "" if value is None else value


class FlatEstimate(_EstimateBase):
    kind: Literal["flat"] = "flat"


class PackagedEstimate(_EstimateBase):
    kind: Literal["packaged"] = "packaged"
    packages: RawEntries
    selected_package_index: int | None = Field(default=None, alias="selectedPackageIndex")


EstimatePayload = FlatEstimate | PackagedEstimate


class NormalizedEstimate(BaseModel):
    id: str
    client_name: str = ""
    client_phone: str = ""
    client_email: str | None = None
    package_name: str | None = None
    services: RawEntries = []
    deliverables: TextLines = []


class EstimateResponse(BaseModel):
    id: str
    status: str | None
    client_name: str | None
    updated_at: str
