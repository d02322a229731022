"""Strict schema baseline with forbidden extras by default."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Neutral strict base for infrastructure response DTOs."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)
