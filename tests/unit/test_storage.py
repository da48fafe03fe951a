"""Unit tests for storage backends and database URL handling."""

from unittest.mock import Mock

import pytest

from app.core import supabase_client
from app.core.storage_utils import LocalStorage, StorageError, SupabaseStorage, generate_filename
from app.database import build_database_url


class TestLocalStorage:
    def test_upload_writes_file_and_returns_url(self, tmp_path):
        storage = LocalStorage(tmp_path, "/media/")

        url = storage.upload("products/1/images/a.png", b"data", "image/png")

        assert url == "/media/products/1/images/a.png"
        assert (tmp_path / "products/1/images/a.png").read_bytes() == b"data"

    def test_delete_removes_file(self, tmp_path):
        storage = LocalStorage(tmp_path, "/media")
        storage.upload("products/1/images/a.png", b"data", "image/png")

        storage.delete("products/1/images/a.png")

        assert not (tmp_path / "products/1/images/a.png").exists()

    def test_delete_missing_is_noop(self, tmp_path):
        LocalStorage(tmp_path, "/media").delete("products/404/images/none.png")

    def test_path_escape_rejected(self, tmp_path):
        storage = LocalStorage(tmp_path / "media", "/media")

        with pytest.raises(StorageError):
            storage.upload("../outside.png", b"data", "image/png")


class TestSupabaseStorage:
    @pytest.fixture
    def supabase(self, monkeypatch):
        """Stub Supabase client whose storage bucket records calls."""
        client = Mock()
        bucket = client.storage.from_.return_value
        bucket.get_public_url.return_value = "https://proj.supabase.co/storage/v1/object/public/assets/products/1/images/a.png"
        monkeypatch.setattr(supabase_client, "supabase_admin", lambda: client)
        return client

    def test_upload_upserts_and_returns_public_url(self, supabase):
        url = SupabaseStorage("assets").upload("products/1/images/a.png", b"data", "image/png")

        bucket = supabase.storage.from_.return_value
        supabase.storage.from_.assert_called_with("assets")
        bucket.upload.assert_called_once_with(
            "products/1/images/a.png",
            b"data",
            {"upsert": "true", "content-type": "image/png"},
        )
        bucket.get_public_url.assert_called_once_with("products/1/images/a.png")
        assert url.endswith("/assets/products/1/images/a.png")

    def test_delete_removes_path_list(self, supabase):
        SupabaseStorage("assets").delete("products/1/images/a.png")

        supabase.storage.from_.return_value.remove.assert_called_once_with(["products/1/images/a.png"])

    def test_upload_failure_wrapped(self, supabase):
        supabase.storage.from_.return_value.upload.side_effect = RuntimeError("bucket not found")

        with pytest.raises(StorageError):
            SupabaseStorage("assets").upload("products/1/images/a.png", b"data", "image/png")

    def test_delete_failure_wrapped(self, supabase):
        supabase.storage.from_.return_value.remove.side_effect = RuntimeError("boom")

        with pytest.raises(StorageError):
            SupabaseStorage("assets").delete("products/1/images/a.png")


def test_generate_filename():
    name = generate_filename("png")
    assert name.endswith(".png")
    assert len(name) == 36 + 4


class TestDatabaseUrl:
    def test_sqlite_untouched(self):
        assert build_database_url("sqlite:///./catalog.db") == "sqlite:///./catalog.db"

    def test_postgres_gets_sslmode(self):
        assert build_database_url("postgresql://u:p@h/db") == "postgresql://u:p@h/db?sslmode=require"

    def test_postgres_with_query_gets_sslmode(self):
        url = build_database_url("postgresql://u:p@h/db?application_name=x")
        assert url.endswith("&sslmode=require")

    def test_existing_sslmode_kept(self):
        url = "postgresql://u:p@h/db?sslmode=disable"
        assert build_database_url(url) == url
