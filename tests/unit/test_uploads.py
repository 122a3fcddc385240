"""
Unit tests for mapping /uploads URLs back to files on disk.
"""

import pytest

from config import settings
from utils.uploads import CONTENT_TYPE_EXTENSIONS, remove_upload, upload_path


@pytest.fixture()
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    path.mkdir()
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(path))
    return path


class TestUploadPath:

    def test_bare_name_resolves_inside(self, upload_dir):
        assert upload_path("/uploads/abc.png") == (upload_dir / "abc.png").resolve()

    @pytest.mark.parametrize("image_url", [
        "/uploads/../victim.txt",
        "/uploads/../../etc/passwd",
        "/uploads/nested/abc.png",
        "/uploads/..\\victim.txt",
        "/uploads/",
        "/uploads/..",
        "https://example.com/abc.png",
        "",
        None,
    ])
    def test_everything_else_is_refused(self, upload_dir, image_url):
        assert upload_path(image_url) is None

    def test_remove_leaves_outside_files(self, upload_dir):
        victim = upload_dir.parent / "victim.txt"
        victim.write_text("keep me")

        remove_upload("/uploads/../victim.txt")

        assert victim.exists()

    def test_remove_deletes_upload(self, upload_dir):
        saved = upload_dir / "abc.png"
        saved.write_bytes(b"png")

        remove_upload("/uploads/abc.png")

        assert not saved.exists()

    def test_extensions_are_image_types_only(self):
        assert set(CONTENT_TYPE_EXTENSIONS.values()) == {"jpg", "png", "webp", "gif"}
