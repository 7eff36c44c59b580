"""Tests for the Supabase and Cloudinary platform backends."""

import re
from unittest.mock import MagicMock

import cloudinary.exceptions
import cloudinary.uploader
import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError
from storage3.exceptions import StorageApiError
from supabase import AuthError

from cashbook.relay import create_app
from cashbook.services.platform.cloudinary_storage import (
    CloudinaryObjectStorage,
    resource_type_for,
)
from cashbook.services.platform.interface import (
    AuthenticationError,
    RecordError,
    StorageError,
)
from cashbook.services.platform.supabase_client import SupabasePlatform


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def supabase_platform(client):
    return SupabasePlatform("https://project.supabase.co", "service-role-key", client=client)


class TestSupabaseStorage:
    """Tests for SupabasePlatform object storage."""

    def test_duplicate_key_message_reaches_relay_caller(self, client, supabase_platform):
        bucket = client.storage.from_.return_value
        bucket.upload.side_effect = StorageApiError("The resource already exists", "Duplicate", 409)
        relay = TestClient(create_app(supabase_platform))

        response = relay.post(
            "/upload-receipt",
            files={"file": ("photo.png", b"data", "image/png")},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "The resource already exists"}

    def test_storage_error_message(self, client, supabase_platform):
        bucket = client.storage.from_.return_value
        bucket.upload.side_effect = StorageApiError("Bucket not found", "NotFound", 404)

        with pytest.raises(StorageError) as exc:
            supabase_platform.store_object("receipts", "receipt-1.jpg", b"x", "image/jpeg")
        assert exc.value.message == "Bucket not found"

    def test_upload_and_public_url(self, client, supabase_platform):
        bucket = client.storage.from_.return_value
        bucket.upload.return_value = MagicMock(path="receipt-1.png")
        bucket.get_public_url.return_value = "https://project.supabase.co/storage/v1/object/public/receipts/receipt-1.png"
        relay = TestClient(create_app(supabase_platform, bucket="receipts"))

        response = relay.post(
            "/upload-receipt",
            files={"file": ("photo.png", b"data", "image/png")},
        )

        assert response.status_code == 200
        client.storage.from_.assert_called_with("receipts")
        kwargs = bucket.upload.call_args.kwargs
        assert re.fullmatch(r"receipt-\d+\.png", kwargs["path"])
        assert kwargs["file"] == b"data"
        assert kwargs["file_options"] == {"content-type": "image/png"}
        bucket.get_public_url.assert_called_once_with("receipt-1.png")
        assert response.json()["publicUrl"].endswith("/receipts/receipt-1.png")


class TestSupabaseRecords:
    """Tests for SupabasePlatform inserts, queries and sign-in."""

    def test_insert_error_message(self, client, supabase_platform):
        execute = client.table.return_value.insert.return_value.execute
        execute.side_effect = APIError({"message": "permission denied for table transactions"})

        with pytest.raises(RecordError) as exc:
            supabase_platform.insert("transactions", {"amount": "1"})
        assert exc.value.message == "permission denied for table transactions"

    def test_insert_returns_stored_row(self, client, supabase_platform):
        execute = client.table.return_value.insert.return_value.execute
        execute.return_value = MagicMock(data=[{"id": "t-1", "amount": "1"}])

        assert supabase_platform.insert("transactions", {"amount": "1"}) == {"id": "t-1", "amount": "1"}
        client.table.return_value.insert.assert_called_once_with([{"amount": "1"}])

    def test_query_applies_filters_and_order(self, client, supabase_platform):
        request = client.table.return_value.select.return_value
        request.gte.return_value = request
        request.lte.return_value = request
        request.order.return_value = request
        request.execute.return_value = MagicMock(data=[])

        supabase_platform.query(
            "transactions",
            filters=[("date", "gte", "2024-01-01"), ("date", "lte", "2024-01-31")],
            order=[("date", True), ("created_at", True)],
        )

        request.gte.assert_called_once_with("date", "2024-01-01")
        request.lte.assert_called_once_with("date", "2024-01-31")
        assert [c.args for c in request.order.call_args_list] == [("date",), ("created_at",)]
        assert all(c.kwargs == {"desc": True} for c in request.order.call_args_list)

    def test_rejected_sign_in(self, client, supabase_platform):
        client.auth.sign_in_with_password.side_effect = AuthError("Invalid login credentials", None)

        with pytest.raises(AuthenticationError) as exc:
            supabase_platform.authenticate("a@b.com", "wrong")
        assert exc.value.message == "Invalid login credentials"


class TestCloudinaryStorage:
    """Tests for CloudinaryObjectStorage."""

    @pytest.fixture
    def uploads(self, monkeypatch):
        calls = []

        def fake_upload(data, **options):
            calls.append((data, options))
            resource_type = options["resource_type"]
            if resource_type == "auto":
                resource_type = "image"
            return {
                "public_id": f"{options['folder']}/{options['public_id']}",
                "resource_type": resource_type,
                "secure_url": (
                    f"https://res.cloudinary.com/demo/{resource_type}/upload/"
                    f"v1/{options['folder']}/{options['public_id']}"
                ),
            }

        monkeypatch.setattr(cloudinary.uploader, "upload", fake_upload)
        return calls

    @pytest.fixture
    def storage(self):
        return CloudinaryObjectStorage("demo", "key", "secret")

    @pytest.mark.parametrize("content_type,expected", [
        ("image/png", "image"),
        ("application/pdf", "image"),
        ("video/mp4", "video"),
        ("text/csv", "raw"),
        ("application/octet-stream", "auto"),
        (None, "auto"),
    ])
    def test_resource_type_for(self, content_type, expected):
        assert resource_type_for(content_type) == expected

    def test_raw_file_url_keeps_resource_type(self, uploads, storage):
        relay = TestClient(create_app(storage, bucket="receipts"))

        response = relay.post(
            "/upload-receipt",
            files={"file": ("statement.csv", b"a,b\n1,2\n", "text/csv")},
        )

        [(data, options)] = uploads
        assert data == b"a,b\n1,2\n"
        assert options["resource_type"] == "raw"
        assert options["folder"] == "receipts"
        assert re.fullmatch(r"receipt-\d+\.csv", options["public_id"])
        url = response.json()["publicUrl"]
        assert url.startswith("https://res.cloudinary.com/demo/raw/upload/")
        assert url.endswith(".csv")

    def test_image_public_id_drops_extension(self, uploads, storage):
        path = storage.store_object("receipts", "receipt-7.png", b"img", "image/png")

        [(_, options)] = uploads
        assert options["public_id"] == "receipt-7"
        assert options["resource_type"] == "image"
        assert storage.public_url("receipts", path) == (
            "https://res.cloudinary.com/demo/image/upload/v1/receipts/receipt-7"
        )

    def test_upload_error(self, monkeypatch, storage):
        def failing_upload(data, **options):
            raise cloudinary.exceptions.Error("Invalid image file")

        monkeypatch.setattr(cloudinary.uploader, "upload", failing_upload)
        relay = TestClient(create_app(storage))

        response = relay.post(
            "/upload-receipt",
            files={"file": ("photo.jpg", b"x", "image/jpeg")},
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Invalid image file"}
