# pharmatrust/services/registration_service.py
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError

from pharmatrust.database import db
from pharmatrust.errors import AuthError, ConflictError, NotFoundError
from pharmatrust.models.registry_models import (
    PPBRecord,
    RegistrationRequest,
    STATUS_APPROVED,
    STATUS_PENDING,
)
from pharmatrust.models.request_models import SignupModel

logger = logging.getLogger(__name__)

STATUS_NOT_FOUND = "not_found"


class RegistrationService:
    """
    Signup -> pending -> admin approve (on-chain registerUser) / reject (row deleted).
    """

    def __init__(self, contract):
        self.contract = contract

    # -------------------------
    # Lookups
    # -------------------------
    @staticmethod
    def _find(wallet: str):
        return db.session.execute(
            db.select(RegistrationRequest).filter_by(walletAddress=(wallet or "").strip())
        ).scalar_one_or_none()

    @staticmethod
    def _find_pending(wallet: str) -> RegistrationRequest:
        row = RegistrationService._find(wallet)
        if row is None or row.status != STATUS_PENDING:
            raise NotFoundError("No pending request for this wallet")
        return row

    # -------------------------
    # Public API
    # -------------------------
    def signup(self, payload: SignupModel) -> Dict[str, Any]:
        if self._find(payload.walletAddress) is not None:
            raise ConflictError("Wallet already registered or pending approval")

        license_row = db.session.execute(
            db.select(PPBRecord).filter_by(licenseNumber=payload.licenseNumber)
        ).scalar_one_or_none()
        if license_row is None:
            raise NotFoundError("License number not found in PPB registry")

        db.session.add(
            RegistrationRequest(
                name=payload.name,
                email=payload.email,
                role=payload.role,
                walletAddress=payload.walletAddress,
                licenseNumber=payload.licenseNumber,
                status=STATUS_PENDING,
            )
        )
        try:
            db.session.commit()
        except IntegrityError:
            # a concurrent signup for the same wallet won the unique index
            db.session.rollback()
            raise ConflictError("Wallet already registered or pending approval")
        logger.info("Signup pending: %s (license %s)", payload.walletAddress, payload.licenseNumber)
        return {"success": True, "message": "Registration pending verification by admin"}

    def login(self, wallet: str) -> RegistrationRequest:
        row = self._find(wallet)
        if row is None:
            raise NotFoundError("User not found")
        if row.status != STATUS_APPROVED:
            raise AuthError("Account not approved yet")
        return row

    @staticmethod
    def list_pending() -> List[Dict[str, Any]]:
        rows = db.session.execute(
            db.select(RegistrationRequest).filter_by(status=STATUS_PENDING)
        ).scalars()
        return [r.to_dict() for r in rows]

    def approve(self, wallet: str) -> Dict[str, Any]:
        row = self._find_pending(wallet)
        wallet, name, role = row.walletAddress, row.name, row.role

        # chain first; a failure here leaves the row pending
        tx_hash = self.contract.register_user(wallet, name, role)

        result = db.session.execute(
            db.update(RegistrationRequest)
            .where(
                RegistrationRequest.walletAddress == wallet,
                RegistrationRequest.status == STATUS_PENDING,
            )
            .values(status=STATUS_APPROVED)
        )
        db.session.commit()
        if result.rowcount != 1:
            # another approve/reject committed while the tx was confirming
            raise NotFoundError("No pending request for this wallet")

        logger.info("Approved %s (tx %s)", wallet, tx_hash)
        return {"success": True, "message": "User approved and registered on-chain", "txHash": tx_hash}

    def reject(self, wallet: str) -> Dict[str, Any]:
        row = self._find_pending(wallet)
        wallet = row.walletAddress
        db.session.delete(row)
        db.session.commit()
        logger.info("Rejected %s", wallet)
        return {"success": True, "message": "Registration request rejected"}

    def user_status(self, wallet: str) -> str:
        row = self._find(wallet)
        return row.status if row is not None else STATUS_NOT_FOUND

    def get_user(self, wallet: str) -> RegistrationRequest:
        row = self._find(wallet)
        if row is None:
            raise NotFoundError("User not found")
        return row

    @staticmethod
    def list_ppb() -> Dict[str, Any]:
        records = db.session.execute(db.select(PPBRecord).order_by(PPBRecord.id)).scalars().all()
        return {"success": True, "total": len(records), "data": [r.to_dict() for r in records]}
