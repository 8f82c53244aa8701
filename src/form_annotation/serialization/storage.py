"""Loading and saving form annotations as flat JSON files.

File-system errors (missing file, permission denied, target is a directory)
propagate unchanged as ``OSError`` subclasses.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from ..config.models import SerializationSettings
from ..models.form import FormAnnotation
from .exceptions import DecodeError
from .serializer import FormAnnotationSerializer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_from_file(
    file_path: PathLike,
    settings: Optional[SerializationSettings] = None,
) -> FormAnnotation:
    """
    Load a FormAnnotation from a JSON file.

    Args:
        file_path: Path of the file to read.
        settings: Optional serialization settings (text encoding).

    Returns:
        The decoded FormAnnotation.

    Raises:
        OSError: If the file cannot be read.
        DecodeError: If the content is not a valid annotation.
    """
    path = Path(file_path)
    data = path.read_bytes()

    try:
        doc = FormAnnotationSerializer(settings).decode(data)
    except DecodeError as e:
        raise e.with_file(str(path)) from e

    logger.info(f"Loaded form annotation from: {path}")
    return doc


def save_to_file(
    doc: FormAnnotation,
    file_path: PathLike,
    settings: Optional[SerializationSettings] = None,
) -> None:
    """
    Write a FormAnnotation to a JSON file.

    The file is created with ``settings.file_mode`` (0o644 by default, subject
    to the process umask) or truncated and overwritten if it already exists.
    The write is not atomic.

    Args:
        doc: The FormAnnotation to write.
        file_path: Destination path.
        settings: Optional serialization settings.

    Raises:
        OSError: If the file cannot be written.
        EncodeError: If the annotation cannot be encoded; nothing is written.
    """
    settings = settings or SerializationSettings()
    data = FormAnnotationSerializer(settings).encode(doc)
    path = Path(file_path)

    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, settings.file_mode)
    with os.fdopen(fd, "wb") as f:
        f.write(data)

    logger.info(f"Saved form annotation to: {path}")
