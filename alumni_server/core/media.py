# alumni_server/core/media.py

import re
import uuid
import base64
import binascii
import logging
from typing import Iterable, Optional
from pydantic import BaseModel
from sqlalchemy.orm import Session

from alumni_server.core.errors import ValidationError
from alumni_server.models.media import Media


logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r"^data:(?P<mime>[^;,]+);base64,(?P<payload>.+)$", re.DOTALL)


class MediaFile(BaseModel):
    """
    Inline upload. `data` is either a data URI or a bare base64 payload whose
    MIME type is given by `type`.
    """
    type: Optional[str] = None
    data: str


def parse_upload(data: str, fallback_type: str | None = None) -> tuple[str, str]:
    """
    Splits an upload into (mime type, base64 payload) and checks the payload decodes.
    """
    match = DATA_URI_PATTERN.match(data.strip())
    if match:
        data_type, payload = match.group("mime"), match.group("payload")
    else:
        data_type, payload = fallback_type, data.strip()

    if not data_type:
        raise ValidationError("Media type is required")
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Invalid base64 data")
    return data_type, payload


def _stage(db: Session, data_type: str, payload: str) -> str:
    media_id = str(uuid.uuid4())
    db.add(Media(media_id=media_id, data_type=data_type, base64data=payload))
    return media_id


def store_media(db: Session, data: str, fallback_type: str | None = None) -> str:
    data_type, payload = parse_upload(data, fallback_type)
    return _stage(db, data_type, payload)


def store_media_files(db: Session, files: Iterable[MediaFile] | None) -> list[str]:
    """
    Stages one Media row per upload and returns the new ids in upload order.
    Every upload is validated before anything is staged, so a bad file leaves
    the session untouched. The caller commits together with the entity that
    references them.
    """
    parsed = [parse_upload(f.data, f.type) for f in files or []]
    media_ids = [_stage(db, data_type, payload) for data_type, payload in parsed]
    if media_ids:
        logger.info("Stored %d media file(s)", len(media_ids))
    return media_ids


def data_url(media: Media) -> str:
    return f"data:{media.data_type};base64,{media.base64data}"


def resolve_media(db: Session, media_ids: Iterable[str | None]) -> dict[str, str]:
    """
    Looks up every id in one query and maps media_id -> data URL.
    Unknown ids are simply absent from the result.
    """
    wanted = {m for m in media_ids if m}
    if not wanted:
        return {}
    rows = db.query(Media).filter(Media.media_id.in_(wanted)).all()
    return {row.media_id: data_url(row) for row in rows}
