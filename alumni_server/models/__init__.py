# alumni_server/models/__init__.py

from sqlalchemy.orm import declarative_base


Base = declarative_base()

from . import content, media, user  # noqa: E402,F401
