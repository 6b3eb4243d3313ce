"""Payload serialization for the outbox pattern.

Messages are pydantic models. They are stored as UTF-8 JSON, which is
self-describing enough for the test harness to decode a row back into the
model that produced it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from shared_kernel.outbox.exceptions import MessageDecodeError, MessageSerializationError


class PydanticMessageCodec:
    """Encodes pydantic models to JSON bytes and decodes them in place.

    Implements the MessageCodec protocol.
    """

    def encode(self, message: Any) -> bytes:
        """Serialize a pydantic model to JSON bytes.

        Args:
            message: The model to serialize

        Returns:
            UTF-8 encoded JSON

        Raises:
            MessageSerializationError: If the message is not a pydantic model
                or holds a value pydantic cannot serialize
        """
        if not isinstance(message, BaseModel):
            raise MessageSerializationError(
                type(message).__name__, "not a pydantic model"
            )
        try:
            return message.model_dump_json(by_alias=True).encode("utf-8")
        except PydanticSerializationError as e:
            raise MessageSerializationError(type(message).__name__, str(e)) from e

    def decode_into(self, data: bytes, target: Any) -> None:
        """Validate JSON bytes against the target's model and copy the fields over.

        Args:
            data: Stored payload
            target: Model instance that receives the decoded field values

        Raises:
            MessageDecodeError: If the target is not a pydantic model or the
                payload does not validate against its type
        """
        model_type = type(target)
        if not isinstance(target, BaseModel):
            raise MessageDecodeError(model_type.__name__, "not a pydantic model")
        try:
            decoded = model_type.model_validate_json(bytes(data))
        except ValidationError as e:
            raise MessageDecodeError(model_type.__name__, str(e)) from e

        # Replace the instance state wholesale; works for frozen models too
        object.__setattr__(target, "__dict__", decoded.__dict__)
        object.__setattr__(target, "__pydantic_extra__", decoded.__pydantic_extra__)
        object.__setattr__(
            target, "__pydantic_fields_set__", decoded.__pydantic_fields_set__
        )
