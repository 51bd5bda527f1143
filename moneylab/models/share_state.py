"""
Shareable scenario links.

Calculator state travels in a ``state`` query parameter as base64-encoded
camelCase JSON, so a scenario can be bookmarked or sent to someone else.
"""

import base64
import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def encode_state(state: BaseModel) -> str:
    """
    Encode calculator state for a URL parameter.

    Args:
        state: Calculator state model

    Returns:
        Base64 encoding of the compact camelCase JSON
    """
    payload = state.model_dump_json(by_alias=True)
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_state(encoded: str, model_cls: Type[ModelT]) -> Optional[ModelT]:
    """
    Decode a URL parameter back into calculator state.

    Args:
        encoded: Value produced by ``encode_state``
        model_cls: Model class the payload should validate as

    Returns:
        The decoded model, or None if the link is malformed
    """
    try:
        payload = base64.b64decode(encoded, validate=True).decode("utf-8")
        return model_cls.model_validate_json(payload)
    except ValueError as e:
        # binascii.Error, UnicodeDecodeError and ValidationError are all ValueErrors
        logger.debug(f"Ignoring malformed {model_cls.__name__} link: {e}")
        return None
