# pharmatrust/routes/ipfs/pinata_routes.py

from flask import Blueprint, jsonify

from pharmatrust.models.request_models import PinataUploadModel
from pharmatrust.routes import json_body
from pharmatrust.services import get_batch_service

pinata_bp = Blueprint("pinata", __name__, url_prefix="/pinata")


@pinata_bp.post("/upload")
def upload_metadata():
    """Body: { metadata } -> { success, ipfsHash }"""
    payload = PinataUploadModel(**json_body())
    return jsonify(get_batch_service().pin_metadata(payload.metadata))
