"""Immutable pydantic base shared by tree snapshots and engine payloads."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Frozen model; instances are handed to event listeners as-is."""

    model_config = ConfigDict(frozen=True, extra="ignore")
