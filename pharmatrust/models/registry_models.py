# pharmatrust/models/registry_models.py
from typing import Any, Dict

from pharmatrust.database import db

# role codes as understood by the contract
ROLE_MANUFACTURER = 1
ROLE_DISTRIBUTOR = 2
ROLE_PHARMACY = 3
ROLE_NAMES = {
    ROLE_MANUFACTURER: "Manufacturer",
    ROLE_DISTRIBUTOR: "Distributor",
    ROLE_PHARMACY: "Pharmacy",
}

STATUS_PENDING = "pending"
STATUS_APPROVED = "approved"
STATUS_REJECTED = "rejected"


class RegistrationRequest(db.Model):
    __tablename__ = "registration_requests"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    role = db.Column(db.Integer, nullable=False)
    walletAddress = db.Column(db.String(100), unique=True, nullable=False, index=True)
    licenseNumber = db.Column(db.String(100), nullable=False)
    status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING)  # pending|approved|rejected

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "walletAddress": self.walletAddress,
            "licenseNumber": self.licenseNumber,
            "status": self.status,
        }

    def __repr__(self):
        return f"<RegistrationRequest {self.walletAddress} - {self.status}>"


class PPBRecord(db.Model):
    __tablename__ = "ppb_records"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    licenseNumber = db.Column(db.String(100), unique=True, nullable=False)
    role = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "licenseNumber": self.licenseNumber,
            "role": self.role,
        }
