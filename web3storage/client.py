"""
Main client for the web3.storage HTTP API.

Uses requests for HTTP and filetype for content sniffing.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import filetype
import requests

from .exceptions import (
    APIError,
    AuthenticationError,
    ConnectionError,
    FileReadError,
    TimeoutError,
    ValidationError,
    Web3StorageError,
    error_for_status,
)
from .models import FileMetadata, UploadResult
from .utils import format_file_size, is_valid_cid, with_retry

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.web3.storage"
DEFAULT_GATEWAY_URL = "https://{cid}.ipfs.w3s.link"
DEFAULT_TIMEOUT = 30
DEFAULT_CONTENT_TYPE = "application/octet-stream"
USER_AGENT = "web3storage-python/1.0.0"

# Failures that cannot succeed on a second attempt.
NON_RETRYABLE_ERRORS = (FileReadError, AuthenticationError, ValidationError)


class Web3Storage:
    """
    Client for the web3.storage API and its IPFS gateway.

    The client keeps no session state; tokens are passed on every call and
    never stored, so one instance can be shared freely.

    Example usage:
        >>> client = Web3Storage()
        >>> result = client.upload("photo.png", token="your-api-token")
        >>> if result.ok:
        ...     print(result.response)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        gateway_url: Optional[str] = None,
        timeout: Optional[float] = None,
        default_headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the API. Falls back to WEB3STORAGE_API_URL.
            gateway_url: Gateway URL template containing "{cid}". Falls back to
                WEB3STORAGE_GATEWAY_URL.
            timeout: Request timeout in seconds. Falls back to WEB3STORAGE_TIMEOUT.
            default_headers: Additional headers to include in all requests.
        """
        base_url = base_url or os.environ.get("WEB3STORAGE_API_URL") or DEFAULT_API_URL
        self.base_url = base_url.rstrip("/")
        self.gateway_url = (
            gateway_url or os.environ.get("WEB3STORAGE_GATEWAY_URL") or DEFAULT_GATEWAY_URL
        )
        if "{cid}" not in self.gateway_url:
            raise ValueError("gateway_url must contain a '{cid}' placeholder")
        if timeout is None:
            timeout = float(os.environ.get("WEB3STORAGE_TIMEOUT", DEFAULT_TIMEOUT))
        self.timeout = timeout
        self.default_headers = default_headers or {}

    def _get_headers(self, token: Optional[str] = None) -> Dict[str, str]:
        """Get headers for a request, with bearer auth when a token is given."""
        headers = {"User-Agent": USER_AGENT}
        headers.update(self.default_headers)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _endpoint(self, path: str) -> str:
        return f"{self.base_url}/{path}"

    def _send(
        self,
        method: str,
        url: str,
        token: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        **kwargs,
    ) -> requests.Response:
        """Send a request, translating transport failures into client errors."""
        request_headers = self._get_headers(token)
        if headers:
            request_headers.update(headers)

        logger.debug("%s %s", method, url)
        try:
            return requests.request(
                method, url, headers=request_headers, timeout=self.timeout, **kwargs
            )
        except requests.exceptions.Timeout as e:
            raise TimeoutError(f"Request to {url} timed out") from e
        except requests.exceptions.ConnectionError as e:
            raise ConnectionError(f"Failed to connect to {url}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ConnectionError(f"Request to {url} failed: {e}") from e
        except ValueError as e:
            # Unencodable header values and unparseable URLs surface from
            # http.client and urllib3 as ValueError subclasses.
            raise ValidationError(f"Invalid request to {url}: {e}") from e

    @staticmethod
    def _parse_body(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    @staticmethod
    def _serialize(data: Any) -> str:
        return json.dumps(data, separators=(",", ":"), ensure_ascii=False)

    @staticmethod
    def _error_for(response: requests.Response, data: Any) -> Web3StorageError:
        """Build the typed error describing a response that was not a 200."""
        error = error_for_status(response.status_code, data)
        if error is not None:
            return error
        return APIError(
            f"Unexpected status: {response.status_code}",
            status_code=response.status_code,
            response=data,
        )

    def _check(self, response: requests.Response) -> requests.Response:
        if not 200 <= response.status_code < 300:
            raise self._error_for(response, self._parse_body(response))
        return response

    @staticmethod
    def _read_file(file_path: str) -> Tuple[str, bytes]:
        try:
            with open(file_path, "rb") as f:
                content = f.read()
        except OSError as e:
            raise FileReadError(f"Failed to read {file_path}: {e.strerror or e}") from e
        return os.path.basename(file_path), content

    @staticmethod
    def _sniff_content_type(content: bytes) -> str:
        kind = filetype.guess(content)
        return kind.mime if kind is not None else DEFAULT_CONTENT_TYPE

    def _to_upload_result(self, response: requests.Response) -> UploadResult:
        data = self._parse_body(response)
        body = self._serialize(data)
        if response.status_code == 200:
            return UploadResult(response=body, status_code=200)

        error = self._error_for(response, data)
        logger.warning("Request to %s returned %s", response.url, response.status_code)
        return UploadResult(response=body, error=error)

    # Upload and status

    def upload(self, file_path: str, token: str) -> UploadResult:
        """
        Upload and store a single file.

        Args:
            file_path: Path of the local file to upload.
            token: API token.

        Returns:
            UploadResult; failures are reported in the result, never raised.
        """
        try:
            name, content = self._read_file(file_path)
            content_type = self._sniff_content_type(content)
            response = self._send(
                "POST",
                self._endpoint("upload"),
                token,
                headers={"X-NAME": quote(name)},
                files={name: (name, content, content_type)},
            )
        except Web3StorageError as e:
            logger.warning("Upload of %s failed: %s", file_path, e)
            return UploadResult(response=str(e), error=e)
        return self._to_upload_result(response)

    def status(self, cid: str, token: str) -> UploadResult:
        """
        Retrieve information about an upload.

        Args:
            cid: Content identifier of the upload.
            token: API token.

        Returns:
            UploadResult; failures are reported in the result, never raised.
        """
        try:
            response = self._send("GET", self._endpoint(f"status/{cid}"), token)
        except Web3StorageError as e:
            logger.warning("Status lookup for %s failed: %s", cid, e)
            return UploadResult(response=str(e), error=e)
        return self._to_upload_result(response)

    def _list_uploads(self, token: str) -> Any:
        response = self._check(self._send("GET", self._endpoint("user/uploads"), token))
        return self._parse_body(response)

    def user_uploads(self, token: str) -> str:
        """
        List previous uploads.

        Returns:
            The uploads as a JSON string, or the error message on failure.
        """
        try:
            return self._serialize(self._list_uploads(token))
        except Web3StorageError as e:
            logger.warning("Listing uploads failed: %s", e)
            return str(e)

    def upload_multiple(self, file_paths: List[str], token: str) -> List[UploadResult]:
        """
        Upload several files in a single multipart request.

        Args:
            file_paths: Paths of the local files to upload.
            token: API token.

        Returns:
            One UploadResult per path. Each successful result holds the service
            response annotated with that file's name under "fileName".

        Raises:
            APIError: If the service answers with a status other than 200.
        """
        names = []
        files = []
        try:
            for file_path in file_paths:
                name, content = self._read_file(file_path)
                names.append(name)
                files.append((name, (name, content, self._sniff_content_type(content))))
            response = self._send("POST", self._endpoint("upload"), token, files=files)
        except Web3StorageError as e:
            logger.warning("Batch upload of %d files failed: %s", len(file_paths), e)
            return [UploadResult(response=str(e), error=e) for _ in file_paths]

        data = self._parse_body(response)
        if response.status_code != 200:
            raise APIError(
                f"Upload failed with status: {response.status_code}",
                status_code=response.status_code,
                response=data,
            )

        # The service answers once for the whole batch.
        results = []
        for name in names:
            if isinstance(data, dict):
                annotated = {"fileName": name, **data}
            else:
                annotated = {"fileName": name, "result": data}
            results.append(UploadResult(response=self._serialize(annotated), status_code=200))
        return results

    def upload_with_retry(
        self,
        file_path: str,
        token: str,
        max_retries: int = 3,
        delay: float = 1.0,
    ) -> UploadResult:
        """
        Upload a file, retrying failed attempts with exponential backoff.

        Unreadable local files, rejected tokens and other client-side
        rejections (4xx) are not retried.

        Returns:
            The first successful UploadResult, or the last failed one.
        """
        attempts: List[UploadResult] = []

        def attempt() -> UploadResult:
            result = self.upload(file_path, token)
            attempts.append(result)
            if not result.ok and not isinstance(result.error, NON_RETRYABLE_ERRORS):
                result.raise_for_error()
            return result

        try:
            return with_retry(
                attempt, max_retries=max_retries, delay=delay, retry_on=(Web3StorageError,)
            )
        except Web3StorageError as e:
            logger.warning(
                "Upload of %s failed after %d attempts: %s", file_path, len(attempts), e
            )
            return attempts[-1]

    # Retrieval

    def get_upload(self, cid: str) -> str:
        """Return the gateway URL for a CID, without validating it."""
        return self.gateway_url.format(cid=cid)

    def get_file_url(self, cid: str) -> str:
        """
        Return the gateway download URL for a CID.

        Raises:
            ValidationError: If the CID is malformed.
        """
        if not is_valid_cid(cid):
            raise ValidationError("Invalid CID format")
        return self.get_upload(cid)

    def retrieve_file(self, cid: str) -> bytes:
        """
        Download the contents of a file from the gateway.

        Raises:
            Web3StorageError: If the download fails.
        """
        try:
            response = self._check(self._send("GET", self.get_upload(cid)))
        except Web3StorageError as e:
            raise e.with_prefix("Failed to retrieve file") from e
        return response.content

    def get_file_metadata(self, cid: str, token: str) -> FileMetadata:
        """
        Get detailed metadata about a stored file.

        Raises:
            Web3StorageError: If the lookup fails or returns a non-200 status.
        """
        try:
            response = self._send("GET", self._endpoint(f"status/{cid}"), token)
            data = self._parse_body(response)
            if response.status_code != 200:
                raise self._error_for(response, data)
            if not isinstance(data, dict):
                raise APIError("Unexpected response body", status_code=200, response=data)
        except Web3StorageError as e:
            raise e.with_prefix("Failed to get metadata") from e
        return FileMetadata.from_dict(data)

    def file_exists(self, cid: str) -> bool:
        """Return True if the gateway serves the CID; False on any failure."""
        try:
            response = self._send("HEAD", self.get_upload(cid), allow_redirects=True)
        except Web3StorageError as e:
            logger.debug("Existence check for %s failed: %s", cid, e)
            return False
        return response.status_code == 200

    def get_file_size(self, cid: str) -> str:
        """
        Get the human-readable size of a file, read from the gateway's
        Content-Length header.

        Raises:
            Web3StorageError: If the CID is malformed or the request fails.
        """
        try:
            url = self.get_file_url(cid)
            response = self._check(self._send("HEAD", url, allow_redirects=True))
        except Web3StorageError as e:
            raise e.with_prefix("Failed to get file size") from e

        try:
            size = int(response.headers.get("Content-Length", 0))
        except (TypeError, ValueError):
            size = 0
        return format_file_size(max(size, 0))

    # Account

    def delete_file(self, cid: str, token: str) -> bool:
        """
        Delete a file, if the service supports deletion.

        Returns:
            True if the service answered 200.

        Raises:
            Web3StorageError: If the request could not be made.
        """
        try:
            response = self._send("DELETE", self._endpoint(f"delete/{cid}"), token)
        except Web3StorageError as e:
            raise e.with_prefix("Failed to delete file") from e
        return response.status_code == 200

    def get_total_storage_used(self, token: str) -> str:
        """
        Get the combined size of all uploads, formatted in gigabytes.

        Raises:
            Web3StorageError: If the uploads cannot be listed.
        """
        try:
            data = self._list_uploads(token)
        except Web3StorageError as e:
            raise e.with_prefix("Failed to get storage usage") from e

        if not isinstance(data, list):
            return "0 GB"

        total = 0
        for item in data:
            size = item.get("size") if isinstance(item, dict) else None
            if isinstance(size, (int, float)) and not isinstance(size, bool):
                total += size
        return f"{total / (1024 ** 3):.2f} GB"

    def is_valid_token(self, token: str) -> bool:
        """Return True if the service accepts the token; False on any failure."""
        try:
            response = self._send("HEAD", self._endpoint("user/uploads"), token)
        except Web3StorageError as e:
            logger.debug("Token check failed: %s", e)
            return False
        return response.status_code == 200
