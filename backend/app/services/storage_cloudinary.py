"""
Cloudinary Storage Adapter

Talks to the Cloudinary Upload API directly over HTTPS (signed requests).
"""
import hashlib
import logging
import time
from typing import Optional

import httpx

from .storage_base import AssetStorage, StorageError, StoredAsset, IMAGE

logger = logging.getLogger("uvicorn.error")

# Parameters that are sent but never part of the signature
_UNSIGNED = {"file", "api_key", "resource_type", "cloud_name"}


def _stringify(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def sign_params(params: dict, api_secret: str) -> str:
    """
    Compute a Cloudinary request signature.

    SHA-1 over ``key1=value1&key2=value2...`` (keys sorted, empty values and
    unsigned keys skipped) with the API secret appended.
    """
    to_sign = "&".join(
        f"{k}={_stringify(v)}"
        for k, v in sorted(params.items())
        if k not in _UNSIGNED and v is not None and v != ""
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


class CloudinaryStorage(AssetStorage):
    """Cloudinary Upload API"""

    def __init__(
        self,
        cloud_name: Optional[str],
        api_key: Optional[str],
        api_secret: Optional[str],
        api_base: str = "https://api.cloudinary.com/v1_1",
        timeout: Optional[float] = None,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "Cloudinary"

    def is_available(self) -> bool:
        """Check if credentials are configured"""
        return bool(self.cloud_name and self.api_key and self.api_secret)

    def _endpoint(self, resource_type: str, action: str) -> str:
        return f"{self.api_base}/{self.cloud_name}/{resource_type}/{action}"

    def _signed(self, params: dict) -> dict:
        params = {k: v for k, v in params.items() if v is not None}
        params["timestamp"] = int(time.time())
        params["signature"] = sign_params(params, self.api_secret)
        params["api_key"] = self.api_key
        return {k: _stringify(v) for k, v in params.items()}

    async def _post(self, url: str, data: dict, files: Optional[dict] = None) -> dict:
        if not self.is_available():
            raise StorageError(f"{self.name}: credentials not configured")
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(url, data=data, files=files)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPStatusError as exc:
            raise StorageError(f"{self.name} rejected request ({exc.response.status_code}): {exc.response.text}") from exc
        except httpx.HTTPError as exc:
            raise StorageError(f"{self.name} request failed: {exc}") from exc
        except ValueError as exc:
            raise StorageError(f"{self.name} returned a non-JSON response") from exc

        if isinstance(result, dict) and result.get("error"):
            message = result["error"].get("message") if isinstance(result["error"], dict) else result["error"]
            raise StorageError(f"{self.name} error: {message}")
        return result

    async def upload(
        self,
        data: bytes,
        *,
        folder: str,
        resource_type: str,
        public_id: Optional[str] = None,
        overwrite: bool = False,
    ) -> StoredAsset:
        params = {"folder": folder, "public_id": public_id}
        if overwrite:
            params["overwrite"] = True
        url = self._endpoint(resource_type, "upload")
        logger.debug("[storage] upload %s folder=%s public_id=%s size=%d", resource_type, folder, public_id, len(data))
        result = await self._post(url, self._signed(params), files={"file": ("file", data, "application/octet-stream")})

        secure_url = result.get("secure_url") or result.get("url")
        if not secure_url or not result.get("public_id"):
            raise StorageError(f"{self.name} upload response is missing secure_url/public_id")
        return StoredAsset(
            url=secure_url,
            public_id=result["public_id"],
            resource_type=result.get("resource_type", resource_type),
            bytes=result.get("bytes"),
            format=result.get("format"),
        )

    async def delete(self, public_id: str, *, resource_type: str = IMAGE) -> None:
        url = self._endpoint(resource_type, "destroy")
        logger.debug("[storage] destroy %s public_id=%s", resource_type, public_id)
        result = await self._post(url, self._signed({"public_id": public_id, "invalidate": True}))
        outcome = result.get("result")
        if outcome not in ("ok", "not found"):
            raise StorageError(f"{self.name} destroy failed for {public_id}: {outcome}")
