# alumni_server/models/media.py

from sqlalchemy import Column, Integer, String, Text, DateTime
from alumni_server.core.utils import utcnow
from . import Base


class Media(Base):
    """
    An uploaded image, stored as base64 text and referenced elsewhere by media_id.
    Rows are never updated or deleted.
    """
    __tablename__ = "media"

    id = Column(Integer, primary_key=True, index=True)
    media_id = Column(String(36), unique=True, index=True, nullable=False)
    data_type = Column(String, nullable=False)
    base64data = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
