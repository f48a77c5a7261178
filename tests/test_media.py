import pytest

from alumni_server.core.errors import ValidationError
from alumni_server.core.media import MediaFile, parse_upload, resolve_media, store_media, store_media_files
from alumni_server.models.media import Media

PIXEL = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="


def test_parse_data_uri():
    assert parse_upload(f"data:image/png;base64,{PIXEL}") == ("image/png", PIXEL)


def test_data_uri_type_wins_over_fallback():
    data_type, _ = parse_upload(f"data:image/gif;base64,{PIXEL}", "image/png")

    assert data_type == "image/gif"


def test_bare_payload_uses_fallback_type():
    assert parse_upload(PIXEL, "image/jpeg") == ("image/jpeg", PIXEL)


def test_bare_payload_without_type():
    with pytest.raises(ValidationError, match="Media type is required"):
        parse_upload(PIXEL)


@pytest.mark.parametrize("payload", ["not base64!", "abc"])
def test_invalid_payload(payload):
    with pytest.raises(ValidationError, match="Invalid base64 data"):
        parse_upload(payload, "image/png")


def test_resolve_media(db):
    media_id = store_media(db, PIXEL, "image/png")
    db.commit()

    resolved = resolve_media(db, [media_id, "unknown", None])
    assert resolved == {media_id: f"data:image/png;base64,{PIXEL}"}
    assert resolve_media(db, []) == {}


def test_bad_upload_stages_nothing(db):
    files = [
        MediaFile(type="image/png", data=PIXEL),
        MediaFile(type="image/png", data="not base64!"),
    ]
    with pytest.raises(ValidationError):
        store_media_files(db, files)

    assert not db.new
    db.commit()
    assert db.query(Media).count() == 0
