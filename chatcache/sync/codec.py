# =============================================================================
# File: chatcache/sync/codec.py
# Description: Entity codec - stored text <-> domain models
# =============================================================================

from __future__ import annotations

from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from chatcache.common.exceptions.exceptions import CorruptRecordError

M = TypeVar("M", bound=BaseModel)


class EntityCodec:
    """
    Reversible mapping between entities and the JSON text stored under a key.

    Only explicitly-set fields are written (by wire alias), so a decoded
    record re-encodes to the same text. `None` (absent key) decodes to
    `None`; anything else that is not a valid record raises
    CorruptRecordError.
    """

    @staticmethod
    def encode(entity: BaseModel) -> str:
        return entity.model_dump_json(by_alias=True, exclude_unset=True)

    @staticmethod
    def decode(model: Type[M], raw: Optional[str]) -> Optional[M]:
        if raw is None:
            return None
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise CorruptRecordError(model.__name__, f"invalid utf-8: {e}") from e
        if not raw:
            raise CorruptRecordError(model.__name__, "empty value")
        try:
            return model.model_validate_json(raw)
        except PydanticValidationError as e:
            raise CorruptRecordError(model.__name__, str(e)) from e

    def decode_many(self, model: Type[M], raws: list) -> list:
        """Decode a list slice; one corrupt entry fails the whole read."""
        return [self.decode(model, raw) for raw in raws]


default_codec = EntityCodec()
