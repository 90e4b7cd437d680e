# pharmatrust/services/__init__.py
from flask import current_app

from pharmatrust.services.batch_service import BatchService
from pharmatrust.services.registration_service import RegistrationService


def get_batch_service() -> BatchService:
    cfg = current_app.config
    return BatchService(cfg["CONTRACT_CLIENT"], cfg["PINNING_CLIENT"], cfg["FRONTEND_URL"])


def get_registration_service() -> RegistrationService:
    return RegistrationService(current_app.config["CONTRACT_CLIENT"])
