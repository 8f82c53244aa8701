"""Serialization and file I/O for form annotations."""

from .exceptions import DecodeError, EncodeError
from .serializer import (
    FormAnnotationSerializer,
    decode,
    encode,
    from_text,
    to_text,
)
from .storage import load_from_file, save_to_file

__all__ = [
    "FormAnnotationSerializer",
    "encode",
    "decode",
    "to_text",
    "from_text",
    "load_from_file",
    "save_to_file",
    "DecodeError",
    "EncodeError",
]
