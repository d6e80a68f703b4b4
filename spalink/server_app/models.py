from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from spalink.domain.reading import Reading


class ReadingResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    timestamp: int
    temperature: Optional[float] = None
    heating: bool
    jets_lo: bool
    jets_hi: bool
    aux_hi: bool
    filtering: bool
    light_on: bool
    edit: bool
    am: bool
    overheat: bool
    jets2_hi: bool
    jets2_lo: bool
    aux_lo: bool

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingResponse":
        return cls(**reading.as_dict())


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"
    collector_running: bool
    collection_in_flight: bool
    last_reading_at: Optional[int] = None


class LogEventsResponse(BaseModel):
    events: List[Dict[str, Any]] = Field(default_factory=list)
