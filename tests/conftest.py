"""
Pytest configuration: an app on a throwaway SQLite file with fake
contract and pinning clients injected.
"""

import pytest

from pharmatrust import create_app
from pharmatrust.errors import ExternalServiceError
from pharmatrust.models.batch_models import Batch, VerificationResult

MANUFACTURER = "0x1111111111111111111111111111111111111111"
DISTRIBUTOR = "0x2222222222222222222222222222222222222222"


class FakeContractClient:
    """Records calls; set `fail_with` to make every write raise."""

    def __init__(self):
        self.calls = []
        self.fail_with = None
        self.batches = [
            Batch(id=1, name="Amoxicillin 500mg", batchNumber="AMX-001", ipfsHash="QmA",
                  manufacturer=MANUFACTURER, currentOwner=MANUFACTURER, timestamp=1700000000),
            Batch(id=2, name="Paracetamol 1g", batchNumber="PCM-002", ipfsHash="QmB",
                  manufacturer=MANUFACTURER, currentOwner=DISTRIBUTOR, revoked=True,
                  timestamp=1700000500, revokeReason="contamination"),
        ]

    def _write(self, name, *args):
        self.calls.append((name, args))
        if self.fail_with:
            raise ExternalServiceError(self.fail_with)
        return "0x" + format(len(self.calls), "064x")

    def verify_batch(self, batch_id):
        self.calls.append(("verify_batch", (batch_id,)))
        return VerificationResult(valid=True, owner=MANUFACTURER, revoked=False, history=[MANUFACTURER])

    def register_product(self, name, batch_number, ipfs_hash):
        return self._write("register_product", name, batch_number, ipfs_hash)

    def transfer_ownership(self, batch_id, new_owner):
        return self._write("transfer_ownership", batch_id, new_owner)

    def revoke_batch(self, batch_id, reason=""):
        return self._write("revoke_batch", batch_id, reason)

    def register_user(self, wallet, name, role):
        return self._write("register_user", wallet, name, role)

    def get_all_batches(self):
        return list(self.batches)

    def get_batches_by_manufacturer(self, wallet):
        return [b for b in self.batches if b.manufacturer == wallet]

    def count(self, name):
        return len([c for c in self.calls if c[0] == name])


class FakePinningClient:

    def __init__(self):
        self.pinned = []
        self.fail_with = None

    def pin_json(self, document):
        if self.fail_with:
            raise ExternalServiceError(self.fail_with)
        self.pinned.append(document)
        return f"QmFakeCid{len(self.pinned)}"


@pytest.fixture
def contract():
    return FakeContractClient()


@pytest.fixture
def pinning():
    return FakePinningClient()


@pytest.fixture
def app(tmp_path, contract, pinning):
    app = create_app(
        {
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.sqlite'}",
            "FRONTEND_URL": "http://frontend.test",
            "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
        },
        contract_client=contract,
        pinning_client=pinning,
    )
    return app


@pytest.fixture
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture
def signup_body():
    return {
        "name": "Acme Pharma",
        "email": "a@x.com",
        "role": 1,
        "walletAddress": "0xABC",
        "licenseNumber": "PPB-1001",
    }
