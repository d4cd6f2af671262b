# SPDX-FileCopyrightText: 2025 camera-monitor-signaling
#
# SPDX-License-Identifier: MIT
"""Wire messages exchanged with cameras and monitors.

Every frame is a JSON object whose ``type`` field selects the variant.
Offer, answer and candidate payloads are typed as ``Any``: they are relayed
as received and never inspected.
"""

import json
from abc import abstractmethod
from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from signaling.errors import MalformedMessageError


class Role(str, Enum):
    """Signaling role declared by a client when it registers."""

    CAMERA = "camera"
    MONITOR = "monitor"


class _Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Client -> server


class RegisterMessage(_Message):
    type: Literal["register"] = "register"
    role: Role
    name: Optional[str] = None


class RoutedMessage(_Message):
    """A client message addressed to another client by id."""

    target_id: str = Field(alias="targetId")
    from_id: str = Field(alias="fromId")

    @abstractmethod
    def relay(self) -> "ServerMessage":
        """Build the message delivered to the target."""
        ...


class OfferMessage(RoutedMessage):
    type: Literal["offer"] = "offer"
    offer: Any
    camera_name: Optional[str] = Field(default=None, alias="cameraName")

    def relay(self) -> "OfferRelay":
        return OfferRelay(
            offer=self.offer, from_id=self.from_id, camera_name=self.camera_name
        )


class AnswerMessage(RoutedMessage):
    type: Literal["answer"] = "answer"
    answer: Any

    def relay(self) -> "AnswerRelay":
        return AnswerRelay(answer=self.answer, from_id=self.from_id)


class IceCandidateMessage(RoutedMessage):
    type: Literal["ice-candidate"] = "ice-candidate"
    candidate: Any

    def relay(self) -> "IceCandidateRelay":
        return IceCandidateRelay(candidate=self.candidate, from_id=self.from_id)


ClientMessage = Annotated[
    Union[RegisterMessage, OfferMessage, AnswerMessage, IceCandidateMessage],
    Field(discriminator="type"),
]
CLIENT_MESSAGE_TYPES: tuple[type[_Message], ...] = (
    RegisterMessage,
    OfferMessage,
    AnswerMessage,
    IceCandidateMessage,
)
_client_message_adapter: TypeAdapter[Any] = TypeAdapter(ClientMessage)
_client_message_tags = frozenset(
    model.model_fields["type"].default for model in CLIENT_MESSAGE_TYPES
)


# Server -> client


class ServerMessage(_Message):
    # Optional fields left out of the frame when unset.
    omit_if_none: ClassVar[frozenset[str]] = frozenset()

    def encode(self) -> str:
        """Serialize to the JSON text frame sent on the wire."""
        exclude = {field for field in self.omit_if_none if getattr(self, field) is None}
        return json.dumps(self.model_dump(by_alias=True, exclude=exclude))


class Registered(ServerMessage):
    type: Literal["registered"] = "registered"
    id: str


class RequestOffer(ServerMessage):
    type: Literal["request-offer"] = "request-offer"
    monitor_id: str = Field(alias="monitorId")


class OfferRelay(ServerMessage):
    omit_if_none: ClassVar[frozenset[str]] = frozenset({"camera_name"})

    type: Literal["offer"] = "offer"
    offer: Any
    from_id: str = Field(alias="fromId")
    camera_name: Optional[str] = Field(default=None, alias="cameraName")


class AnswerRelay(ServerMessage):
    type: Literal["answer"] = "answer"
    answer: Any
    from_id: str = Field(alias="fromId")


class IceCandidateRelay(ServerMessage):
    type: Literal["ice-candidate"] = "ice-candidate"
    candidate: Any
    from_id: str = Field(alias="fromId")


class CameraDisconnected(ServerMessage):
    type: Literal["camera-disconnected"] = "camera-disconnected"
    camera_id: str = Field(alias="cameraId")


class MonitorDisconnected(ServerMessage):
    type: Literal["monitor-disconnected"] = "monitor-disconnected"
    monitor_id: str = Field(alias="monitorId")


def parse_client_message(raw: Union[str, bytes]) -> Optional[_Message]:
    """Parse one inbound frame.

    Returns None for objects whose ``type`` is not a client message type,
    so newer clients can send messages this server does not know.

    Raises:
        MalformedMessageError: The frame is not a JSON object, or a known
            message type is missing or mistyping a field.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedMessageError(f"invalid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise MalformedMessageError(
            f"expected a JSON object, got {type(data).__name__}"
        )
    message_type = data.get("type")
    if not isinstance(message_type, str) or message_type not in _client_message_tags:
        return None

    try:
        return _client_message_adapter.validate_python(data)
    except ValidationError as exc:
        raise MalformedMessageError(str(exc)) from exc
