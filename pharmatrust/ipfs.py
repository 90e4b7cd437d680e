# pharmatrust/ipfs.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import requests

from pharmatrust.errors import ExternalServiceError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60


def _safe_json(resp: requests.Response) -> Optional[Dict[str, Any]]:
    """
    Return JSON dict if response body is JSON, else None.
    Handles HTML gateway error pages safely.
    """
    try:
        data = resp.json()
    except ValueError:
        return None
    return data if isinstance(data, dict) else {"data": data}


def _upstream_message(data: Optional[Dict[str, Any]], resp: requests.Response) -> str:
    # Pinata errors look like {"error": {"reason": ..., "details": ...}} or {"error": "..."}
    if data:
        err = data.get("error")
        if isinstance(err, dict):
            msg = err.get("reason") or err.get("details") or err.get("message")
            if msg:
                return str(msg)
        elif err:
            return str(err)
        if data.get("message"):
            return str(data["message"])
    snippet = (resp.text or "").strip().replace("\n", " ")[:240]
    return snippet or f"HTTP {resp.status_code}"


class PinataClient:
    """Uploads JSON metadata to Pinata and hands back the IPFS CID."""

    def __init__(self, jwt: str, api_url: str = "https://api.pinata.cloud",
                 timeout: int = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.jwt = jwt or ""
        self.api_url = (api_url or "").rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def pin_json(self, document: Any, filename: str = "metadata.json") -> str:
        if not self.jwt:
            raise ExternalServiceError("PINATA_JWT missing in environment")

        payload = json.dumps(document).encode("utf-8")
        url = f"{self.api_url}/pinning/pinFileToIPFS"

        try:
            resp = self.session.post(
                url,
                files={"file": (filename, payload, "application/json")},
                headers={"Authorization": f"Bearer {self.jwt}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Upload to IPFS (Pinata) failed: %s", e)
            raise ExternalServiceError(f"Pinata unreachable: {e}") from e

        data = _safe_json(resp)
        if resp.status_code >= 400:
            msg = _upstream_message(data, resp)
            logger.error("Upload to IPFS (Pinata) failed (HTTP %s): %s", resp.status_code, msg)
            raise ExternalServiceError(msg)

        if data is None:
            raise ExternalServiceError(f"Pinata returned non-JSON response ({resp.status_code})")

        cid = data.get("IpfsHash")
        if not cid:
            raise ExternalServiceError("Pinata response missing IpfsHash")

        logger.info("Uploaded to IPFS (Pinata): %s", cid)
        return cid


def init_pinning(app, client: Optional[PinataClient] = None) -> PinataClient:
    if client is None:
        client = PinataClient(jwt=app.config.get("PINATA_JWT", ""), api_url=app.config.get("PINATA_API_URL"))
        if not client.jwt:
            app.logger.warning("PINATA_JWT not set; metadata pinning will fail")
    app.config["PINNING_CLIENT"] = client
    return client
