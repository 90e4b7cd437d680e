# pharmatrust/routes/admin/admin_routes.py

from flask import Blueprint, current_app, jsonify

from pharmatrust.services import get_batch_service, get_registration_service

admin_bp = Blueprint("admin", __name__)


@admin_bp.get("/pending-requests")
def pending_requests():
    return jsonify({"success": True, "requests": get_registration_service().list_pending()})


@admin_bp.post("/approve-request/<wallet>")
def approve_request(wallet):
    """Registers the wallet on-chain, then flips the request to approved."""
    result = get_registration_service().approve(wallet)
    current_app.logger.info("Approved registration for %s", wallet)
    return jsonify(result)


@admin_bp.post("/reject-request/<wallet>")
def reject_request(wallet):
    return jsonify(get_registration_service().reject(wallet))


@admin_bp.get("/admin/all-batches")
def all_batches():
    return jsonify({"success": True, "batches": get_batch_service().list_all()})
