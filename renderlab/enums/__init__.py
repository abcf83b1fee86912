"""Init file for the enums module."""

from .image_format_enum import ImageFormatEnum
from .message_type_enum import MessageTypeEnum
from .session_state_enum import SessionStateEnum

__all__ = ["ImageFormatEnum", "MessageTypeEnum", "SessionStateEnum"]
