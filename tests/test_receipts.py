"""Tests for receipt naming and the two upload paths."""

import re
from unittest.mock import MagicMock

import pytest
import requests

from cashbook.models import UploadedReceipt
from cashbook.services.receipts import (
    RelayReceiptUploader,
    ReceiptUploadError,
    StorageReceiptUploader,
    build_receipt_uploader,
    receipt_extension,
    receipt_key,
)


def mock_response(ok=True, json_data=None, text=""):
    response = MagicMock()
    response.ok = ok
    response.text = text
    response.json.return_value = json_data if json_data is not None else {}
    return response


class TestReceiptKey:
    """Tests for receipt naming."""

    @pytest.mark.parametrize("filename,expected", [
        ("photo.png", "png"),
        ("archive.tar.gz", "gz"),
        ("scan", "jpg"),
        ("trailing.", "jpg"),
        ("", "jpg"),
        (None, "jpg"),
    ])
    def test_extension(self, filename, expected):
        assert receipt_extension(filename) == expected

    def test_key_uses_milliseconds(self):
        assert receipt_key("photo.png", now_ms=1700000000123) == "receipt-1700000000123.png"

    def test_key_defaults_to_now(self):
        assert re.fullmatch(r"receipt-\d{13}\.png", receipt_key("photo.png"))


class TestRelayReceiptUploader:
    """Tests for uploads through the relay."""

    def test_posts_multipart_file(self):
        session = MagicMock()
        session.post.return_value = mock_response(json_data={"publicUrl": "https://cdn/x.png"})
        uploader = RelayReceiptUploader("http://localhost:3001/", session=session)

        url = uploader.upload(UploadedReceipt(filename="x.png", data=b"img", content_type="image/png"))

        assert url == "https://cdn/x.png"
        session.post.assert_called_once_with(
            "http://localhost:3001/upload-receipt",
            files={"file": ("x.png", b"img", "image/png")},
        )

    def test_error_response(self):
        session = MagicMock()
        session.post.return_value = mock_response(ok=False, text='{"error":"Bucket not found"}')
        uploader = RelayReceiptUploader("http://relay", session=session)

        with pytest.raises(ReceiptUploadError) as exc:
            uploader.upload(UploadedReceipt(filename="x.png", data=b"img"))
        assert exc.value.message == 'Upload proxy failed: {"error":"Bucket not found"}'

    def test_missing_public_url(self):
        session = MagicMock()
        session.post.return_value = mock_response(json_data={})
        uploader = RelayReceiptUploader("http://relay", session=session)

        with pytest.raises(ReceiptUploadError, match="no public URL"):
            uploader.upload(UploadedReceipt(filename="x.png", data=b"img"))

    def test_unreachable_relay(self):
        session = MagicMock()
        session.post.side_effect = requests.ConnectionError("refused")
        uploader = RelayReceiptUploader("http://relay", session=session)

        with pytest.raises(ReceiptUploadError, match="Upload proxy failed"):
            uploader.upload(UploadedReceipt(filename="x.png", data=b"img"))


class TestStorageReceiptUploader:
    """Tests for direct uploads to object storage."""

    def test_default_content_type(self, platform):
        uploader = StorageReceiptUploader(platform, bucket="bills")

        url = uploader.upload(UploadedReceipt(filename="scan", data=b"raw"))

        [(_, bucket, key, content_type)] = platform.calls_of("store_object")
        assert bucket == "bills"
        assert key.endswith(".jpg")
        assert content_type == "application/octet-stream"
        assert url == f"https://files.example.com/bills/{key}"


class TestBuildReceiptUploader:
    """Tests for build_receipt_uploader()."""

    def test_proxy_url_selects_relay(self, platform):
        assert isinstance(build_receipt_uploader("http://relay", platform), RelayReceiptUploader)

    def test_blank_proxy_url_selects_storage(self, platform):
        assert isinstance(build_receipt_uploader("  ", platform), StorageReceiptUploader)
