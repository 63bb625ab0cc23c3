"""Tests for web3.storage client models."""

import dataclasses
import unittest

from web3storage.exceptions import APIError, Web3StorageError
from web3storage.models import (
    PIN_STATUSES,
    FileMetadata,
    PinStatus,
    UploadResult,
)


class TestUploadResult(unittest.TestCase):
    """Test UploadResult model."""

    def test_success(self):
        """Test a successful result."""
        result = UploadResult(response='{"cid":"abc"}', status_code=200)
        self.assertTrue(result.ok)
        self.assertIsNone(result.error)
        result.raise_for_error()

    def test_failure_with_error(self):
        """Test a failed result carries and raises its error."""
        error = APIError("Internal error", status_code=500)
        result = UploadResult(response='{"error":"Internal error"}', error=error)
        self.assertFalse(result.ok)
        self.assertIsNone(result.status_code)
        with self.assertRaises(APIError) as ctx:
            result.raise_for_error()
        self.assertIs(ctx.exception, error)

    def test_failure_without_error(self):
        """Test a non-200 result without an error still raises."""
        result = UploadResult(response="oops")
        with self.assertRaises(Web3StorageError):
            result.raise_for_error()

    def test_to_dict(self):
        """Test to_dict omits a missing status code."""
        self.assertEqual(
            UploadResult(response="{}", status_code=200).to_dict(),
            {"response": "{}", "status_code": 200},
        )
        self.assertEqual(UploadResult(response="boom").to_dict(), {"response": "boom"})

    def test_immutable(self):
        """Test results cannot be modified."""
        result = UploadResult(response="{}", status_code=200)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            result.status_code = 500


class TestPinStatus(unittest.TestCase):
    """Test PinStatus model."""

    def test_from_dict(self):
        """Test PinStatus from dict."""
        pin = PinStatus.from_dict({
            "cid": "QmPin",
            "status": "pinning",
            "created": "2024-01-15T10:30:00Z",
            "delegates": ["/ip4/10.0.0.1/tcp/4001"],
        })
        self.assertEqual(pin.cid, "QmPin")
        self.assertEqual(pin.status, "pinning")
        self.assertEqual(pin.delegates, ["/ip4/10.0.0.1/tcp/4001"])
        self.assertFalse(pin.is_pinned)

    def test_from_dict_defaults(self):
        """Test PinStatus from a sparse dict."""
        pin = PinStatus.from_dict({"cid": "QmPin", "status": "pinned", "delegates": None})
        self.assertEqual(pin.created, "")
        self.assertEqual(pin.delegates, [])
        self.assertTrue(pin.is_pinned)

    def test_statuses(self):
        """Test the known pin statuses."""
        self.assertEqual(PIN_STATUSES, ("queued", "pinning", "pinned", "failed"))

    def test_to_dict(self):
        """Test PinStatus to dict."""
        pin = PinStatus(cid="QmPin", status="queued")
        self.assertEqual(
            pin.to_dict(),
            {"cid": "QmPin", "status": "queued", "created": "", "delegates": []},
        )


class TestFileMetadata(unittest.TestCase):
    """Test FileMetadata model."""

    def test_from_dict(self):
        """Test FileMetadata from dict."""
        data = {
            "name": "photo.png",
            "size": 2048,
            "cid": "QmFile",
            "created": "2024-01-15T10:30:00Z",
            "type": "image/png",
            "pins": [
                {"cid": "QmFile", "status": "pinned", "created": "", "delegates": []},
                {"cid": "QmFile", "status": "failed", "created": "", "delegates": []},
            ],
        }
        metadata = FileMetadata.from_dict(data)
        self.assertEqual(metadata.name, "photo.png")
        self.assertEqual(metadata.size, 2048)
        self.assertEqual([p.status for p in metadata.pins], ["pinned", "failed"])
        self.assertEqual(metadata.to_dict(), data)

    def test_from_dict_missing_fields(self):
        """Test FileMetadata tolerates missing fields."""
        metadata = FileMetadata.from_dict({"cid": "QmFile"})
        self.assertEqual(metadata.cid, "QmFile")
        self.assertEqual(metadata.size, 0)
        self.assertEqual(metadata.name, "")
        self.assertEqual(metadata.pins, [])


if __name__ == "__main__":
    unittest.main()
