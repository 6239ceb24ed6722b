"""Typed realtime events exchanged over the websocket channel.

Inbound frames are validated against :data:`ClientEvent`, a union
discriminated by the ``type`` key. Entity payloads keep any extra fields the
client sends so that other board views receive the full record.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

EVENT_CONNECTED = "connected"
EVENT_NOTIFICATION_NEW = "notification:new"
EVENT_TASK_UPDATED = "task:updated"
EVENT_PROJECT_UPDATED = "project:updated"
EVENT_PONG = "pong"
EVENT_ERROR = "error"

CLIENT_EVENT_AUTH = "auth"
CLIENT_EVENT_TASK_UPDATE = "task:update"
CLIENT_EVENT_PROJECT_UPDATE = "project:update"
CLIENT_EVENT_PING = "ping"


EntityId = Union[Annotated[str, Field(min_length=1)], int]


class TaskMutation(BaseModel):
    """Task fields announced to other board views."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: EntityId
    project_id: EntityId | None = Field(default=None, alias="projectId")
    status: str | None = None
    title: str | None = None


class ProjectMutation(BaseModel):
    """Project fields announced to other board views."""

    model_config = ConfigDict(extra="allow")

    id: EntityId
    name: str | None = None
    status: str | None = None


class TaskUpdateEvent(BaseModel):
    type: Literal["task:update"]
    data: TaskMutation


class ProjectUpdateEvent(BaseModel):
    type: Literal["project:update"]
    data: ProjectMutation


class PingEvent(BaseModel):
    type: Literal["ping"]


class AuthFrame(BaseModel):
    """First frame of every connection, carrying the bearer credential."""

    type: Literal["auth"]
    token: str = Field(min_length=1)


ClientEvent = Annotated[
    Union[TaskUpdateEvent, ProjectUpdateEvent, PingEvent],
    Field(discriminator="type"),
]

client_event_adapter: TypeAdapter[Any] = TypeAdapter(ClientEvent)

# Inbound mutation event -> outbound broadcast event.
BROADCAST_EVENTS = {
    CLIENT_EVENT_TASK_UPDATE: EVENT_TASK_UPDATED,
    CLIENT_EVENT_PROJECT_UPDATE: EVENT_PROJECT_UPDATED,
}


def mutation_payload(event: TaskUpdateEvent | ProjectUpdateEvent) -> dict[str, Any]:
    """Return the JSON-ready payload to broadcast for ``event``."""

    return event.data.model_dump(by_alias=True, exclude_none=True)


__all__ = [
    "EVENT_CONNECTED",
    "EVENT_NOTIFICATION_NEW",
    "EVENT_TASK_UPDATED",
    "EVENT_PROJECT_UPDATED",
    "EVENT_PONG",
    "EVENT_ERROR",
    "CLIENT_EVENT_AUTH",
    "CLIENT_EVENT_TASK_UPDATE",
    "CLIENT_EVENT_PROJECT_UPDATE",
    "CLIENT_EVENT_PING",
    "TaskMutation",
    "ProjectMutation",
    "TaskUpdateEvent",
    "ProjectUpdateEvent",
    "PingEvent",
    "AuthFrame",
    "ClientEvent",
    "client_event_adapter",
    "BROADCAST_EVENTS",
    "mutation_payload",
]
