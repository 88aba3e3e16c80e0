"""
Domain model for properties mirrored from the Sanity CMS.

Models decode CMS documents (field names such as ``_id`` and ``mapUrl`` are
aliases) and serialize back out by alias, so the served JSON has the same
shape as the upstream documents. References are carried through verbatim and
never resolved.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, model_validator


class SanityModel(BaseModel):
    """Base for CMS value objects.

    Fields are read by their CMS name only. Absent fields and JSON nulls fall
    back to the field's zero value; unknown fields are ignored. Scalars are
    strict, so a value of the wrong JSON type (a numeric string, a bool, a
    fractional number for an int) fails validation.
    """

    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Reference(SanityModel):
    """Link to another CMS document."""

    ref: StrictStr = Field(default="", alias="_ref")
    type: StrictStr = Field(default="", alias="_type")


class Slug(SanityModel):
    """CMS slug object; ``current`` is the lookup key."""

    current: StrictStr = ""
    type: StrictStr = Field(default="", alias="_type")


class GeoLocation(SanityModel):
    type: StrictStr = Field(default="", alias="_type")
    lat: StrictFloat = 0.0
    lng: StrictFloat = 0.0


class SanityImage(SanityModel):
    """Image entry; ``asset`` points at an unresolved asset document."""

    key: StrictStr = Field(default="", alias="_key")
    type: StrictStr = Field(default="", alias="_type")
    asset: Reference = Field(default_factory=Reference)


class Facility(SanityModel):
    facility_type: Reference = Field(default_factory=Reference, alias="facilityType")
    facility_name: StrictStr = Field(default="", alias="facilityName")
    description: StrictStr = ""
    photos: List[SanityImage] = Field(default_factory=list)


class Property(SanityModel):
    """A property document as served by the cache."""

    id: StrictStr = Field(default="", alias="_id")
    title: StrictStr = ""
    slug: Slug = Field(default_factory=Slug)
    developer: Reference = Field(default_factory=Reference)
    description: StrictStr = ""
    map_url: StrictStr = Field(default="", alias="mapUrl")
    geo_location: GeoLocation = Field(default_factory=GeoLocation, alias="geoLocation")
    min_price: StrictFloat = Field(default=0.0, alias="minPrice")
    max_price: StrictFloat = Field(default=0.0, alias="maxPrice")
    facilities: List[Facility] = Field(default_factory=list)
    photos: List[SanityImage] = Field(default_factory=list)
    built: StrictInt = 0
    created_at: StrictStr = Field(default="", alias="createdAt")


class QueryResponse(BaseModel):
    """Envelope returned by the Sanity query API.

    ``result`` stays None when the field is absent or not a list; elements are
    left raw so each one can be decoded (and dropped) independently.
    """

    model_config = ConfigDict(extra="ignore")

    result: Optional[List[Any]] = None
    ms: Optional[int] = None
    query: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _coerce_result(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        ms = data.get("ms")
        return {
            "result": data.get("result") if isinstance(data.get("result"), list) else None,
            "ms": ms if isinstance(ms, int) and not isinstance(ms, bool) else None,
            "query": data.get("query") if isinstance(data.get("query"), str) else None,
        }
