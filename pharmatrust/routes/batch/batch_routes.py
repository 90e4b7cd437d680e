# pharmatrust/routes/batch/batch_routes.py

from flask import Blueprint, current_app, jsonify, request

from pharmatrust.models.request_models import (
    RegisterProductModel,
    RevokeBatchModel,
    TransferOwnershipModel,
)
from pharmatrust.routes import json_body
from pharmatrust.services import get_batch_service

batch_bp = Blueprint("batch", __name__)


# ---------------------------------------------------------
# GET /verify/<batchId>
# ---------------------------------------------------------
@batch_bp.get("/verify/<batch_id>")
def verify_batch(batch_id):
    return jsonify(get_batch_service().verify(batch_id))


# ---------------------------------------------------------
# POST /register-product
# ---------------------------------------------------------
@batch_bp.post("/register-product")
def register_product():
    """
    Body: { name, batchId, details }  or  { name, batchId, ipfsHash }
    Pins details to IPFS (unless ipfsHash given), registers on-chain,
    returns tx hash + verify link + QR.
    """
    payload = RegisterProductModel(**json_body())
    result = get_batch_service().register_product(payload)
    current_app.logger.info("Registered batch %s (tx %s)", payload.batchId, result["txHash"])
    return jsonify(result)


# ---------------------------------------------------------
# POST /transfer-ownership
# ---------------------------------------------------------
@batch_bp.post("/transfer-ownership")
def transfer_ownership():
    payload = TransferOwnershipModel(**json_body())
    return jsonify(get_batch_service().transfer_ownership(payload))


# ---------------------------------------------------------
# POST /revoke-batch
# ---------------------------------------------------------
@batch_bp.post("/revoke-batch")
def revoke_batch():
    payload = RevokeBatchModel(**json_body())
    return jsonify(get_batch_service().revoke_batch(payload))


# ---------------------------------------------------------
# Listing
# ---------------------------------------------------------
@batch_bp.get("/batches")
def list_batches():
    return jsonify({"success": True, "batches": get_batch_service().list_all()})


@batch_bp.get("/manufacturer/batches")
def list_manufacturer_batches():
    wallet = request.args.get("walletAddress", "")
    return jsonify({"success": True, "batches": get_batch_service().list_by_manufacturer(wallet)})
