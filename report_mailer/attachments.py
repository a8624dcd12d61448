from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Union

from .errors import NoAttachmentsError
from .models import Attachment

PathLike = Union[str, os.PathLike]


def build_attachments(paths: Iterable[PathLike] | None) -> List[Attachment]:
    """Describe each report file as an attachment; the files are read at send time."""
    if isinstance(paths, (str, bytes, os.PathLike)):
        raise TypeError(f"Expected a sequence of paths, got a single path: {paths!r}")
    items = list(paths) if paths is not None else []
    if not items:
        raise NoAttachmentsError("Cannot send email, no attachments specified.")
    attachments: List[Attachment] = []
    for raw in items:
        path = Path(os.path.abspath(raw))
        attachments.append(Attachment(path=path, name=path.name))
    return attachments
