"""Schema for the health endpoint."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class HealthRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    timestamp: datetime
    connected_users: int
    sessions: int
