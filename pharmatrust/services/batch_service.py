# pharmatrust/services/batch_service.py
import logging
from typing import Any, Dict, List

from web3 import Web3

from pharmatrust.errors import ValidationError
from pharmatrust.models.request_models import (
    RegisterProductModel,
    RevokeBatchModel,
    TransferOwnershipModel,
)
from pharmatrust.qr import encode_qr

logger = logging.getLogger(__name__)


def parse_batch_id(value: Any) -> int:
    """Batch ids are uint256 on-chain; anything else is a client error."""
    try:
        batch_id = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError("batchId must be a positive integer")
    if batch_id <= 0:
        raise ValidationError("batchId must be a positive integer")
    return batch_id


class BatchService:
    """
    Stateless pass-through to the batch registry contract.
    Reads project chain structs into plain dicts; writes wait for confirmation.
    """

    def __init__(self, contract, pinning, frontend_url: str):
        self.contract = contract
        self.pinning = pinning
        self.frontend_url = (frontend_url or "").rstrip("/")

    def verify(self, batch_id: Any) -> Dict[str, Any]:
        bid = parse_batch_id(batch_id)
        result = self.contract.verify_batch(bid).to_dict()
        # QR encodes the raw batch id, not a URL
        result["qrCode"] = encode_qr(str(bid))
        return result

    def verify_url(self, batch_number: str) -> str:
        return f"{self.frontend_url}/verify/{batch_number}"

    def register_product(self, payload: RegisterProductModel) -> Dict[str, Any]:
        # metadata must exist before the batch that references it
        if payload.ipfsHash:
            ipfs_hash = payload.ipfsHash
        else:
            ipfs_hash = self.pinning.pin_json(payload.details)

        tx_hash = self.contract.register_product(payload.name, payload.batchId, ipfs_hash)

        verify_url = self.verify_url(payload.batchId)
        return {
            "txHash": tx_hash,
            "ipfsHash": ipfs_hash,
            "verifyUrl": verify_url,
            "qrCode": encode_qr(verify_url),
        }

    def transfer_ownership(self, payload: TransferOwnershipModel) -> Dict[str, Any]:
        tx_hash = self.contract.transfer_ownership(payload.batchId, payload.newOwner)
        return {"txHash": tx_hash}

    def revoke_batch(self, payload: RevokeBatchModel) -> Dict[str, Any]:
        tx_hash = self.contract.revoke_batch(payload.batchId, payload.reason)
        logger.info("Batch %s revoked (%s)", payload.batchId, payload.reason or "no reason")
        return {"success": True, "message": f"Batch {payload.batchId} revoked", "txHash": tx_hash}

    def list_all(self) -> List[Dict[str, Any]]:
        return [b.to_dict() for b in self.contract.get_all_batches()]

    def list_by_manufacturer(self, wallet: str) -> List[Dict[str, Any]]:
        wallet = (wallet or "").strip()
        if not wallet:
            raise ValidationError("walletAddress is required")
        if not Web3.is_address(wallet):
            raise ValidationError(f"Invalid address: {wallet}")
        return [b.to_dict() for b in self.contract.get_batches_by_manufacturer(wallet)]

    def pin_metadata(self, metadata: Any) -> Dict[str, Any]:
        return {"success": True, "ipfsHash": self.pinning.pin_json(metadata)}
