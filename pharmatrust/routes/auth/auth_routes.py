# pharmatrust/routes/auth/auth_routes.py

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_jwt_extended import create_access_token, get_jwt_identity, jwt_required

from pharmatrust.models.registry_models import RegistrationRequest, ROLE_NAMES
from pharmatrust.models.request_models import LoginModel, SignupModel
from pharmatrust.routes import json_body
from pharmatrust.services import get_registration_service

auth_bp = Blueprint("auth", __name__)


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def _user_public_payload(u: RegistrationRequest) -> dict:
    return {
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "roleName": ROLE_NAMES.get(u.role, ""),
        "walletAddress": u.walletAddress,
        "licenseNumber": u.licenseNumber,
        "status": u.status,
    }


def _issue_token(u: RegistrationRequest) -> str:
    return create_access_token(
        identity=u.walletAddress,
        additional_claims={"name": u.name, "role": u.role},
    )


# -------------------------------------------------------------------
# JSON: /signup
# -------------------------------------------------------------------
@auth_bp.post("/signup")
def signup():
    """
    Body: { name, email, role, walletAddress, licenseNumber }
    Creates a pending registration request; nothing goes on-chain yet.
    """
    payload = SignupModel(**json_body())
    return jsonify(get_registration_service().signup(payload))


# -------------------------------------------------------------------
# JSON: /login
# -------------------------------------------------------------------
@auth_bp.post("/login")
def login():
    """Only approved wallets may log in. Returns user payload + JWT."""
    payload = LoginModel(**json_body())
    user = get_registration_service().login(payload.walletAddress)
    return jsonify(
        success=True,
        message="Login successful",
        user=_user_public_payload(user),
        access_token=_issue_token(user),
    )


@auth_bp.get("/auth/me")
@jwt_required()
def auth_me():
    user = get_registration_service().get_user(get_jwt_identity())
    return jsonify(success=True, user=_user_public_payload(user))


# -------------------------------------------------------------------
# Status lookups
# -------------------------------------------------------------------
@auth_bp.get("/api/user-status/<wallet>")
def user_status(wallet: str):
    return jsonify({"status": get_registration_service().user_status(wallet)})


@auth_bp.get("/user/<wallet>")
def get_user(wallet: str):
    user = get_registration_service().get_user(wallet)
    return jsonify(success=True, user=_user_public_payload(user))
