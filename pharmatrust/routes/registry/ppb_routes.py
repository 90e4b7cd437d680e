# pharmatrust/routes/registry/ppb_routes.py

from flask import Blueprint, jsonify

from pharmatrust.services.registration_service import RegistrationService

ppb_bp = Blueprint("ppb", __name__)


# -----------------------------
# Seeded PPB registry mirror
# -----------------------------
@ppb_bp.get("/api/ppb")
@ppb_bp.get("/seeded")
def list_ppb_records():
    return jsonify(RegistrationService.list_ppb())
