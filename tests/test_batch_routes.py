"""
Batch registry proxy routes against a fake contract client.

Run with: pytest tests/test_batch_routes.py -v
"""

import pytest

from tests.conftest import DISTRIBUTOR, MANUFACTURER

QR_PREFIX = "data:image/png;base64,"


class TestVerify:

    def test_verify_returns_chain_result_and_qr(self, client, contract):
        resp = client.get("/verify/7")
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["valid"] is True
        assert body["owner"] == MANUFACTURER
        assert body["revoked"] is False
        assert body["history"] == [MANUFACTURER]
        assert body["qrCode"].startswith(QR_PREFIX)
        assert contract.calls == [("verify_batch", (7,))]

    @pytest.mark.parametrize("batch_id", ["abc", "0", "-3"])
    def test_verify_rejects_bad_ids(self, client, contract, batch_id):
        assert client.get(f"/verify/{batch_id}").status_code == 400
        assert contract.calls == []


class TestRegisterProduct:

    def test_pins_then_registers_then_renders_qr(self, client, contract, pinning):
        details = {"dosage": "500mg", "expiry": "2027-01-01"}
        resp = client.post("/register-product", json={"name": "Amoxicillin", "batchId": "AMX-9", "details": details})
        assert resp.status_code == 200
        body = resp.get_json()

        assert pinning.pinned == [details]
        assert body["ipfsHash"] == "QmFakeCid1"
        assert contract.calls == [("register_product", ("Amoxicillin", "AMX-9", "QmFakeCid1"))]
        assert body["txHash"].startswith("0x")
        assert body["verifyUrl"] == "http://frontend.test/verify/AMX-9"
        assert body["qrCode"].startswith(QR_PREFIX)

    def test_numeric_batch_id_is_accepted(self, client, contract):
        resp = client.post("/register-product", json={"name": "X", "batchId": 42, "details": {"a": 1}})
        assert resp.status_code == 200
        assert contract.calls[0][1][1] == "42"

    def test_empty_details_document_is_pinned(self, client, contract, pinning):
        resp = client.post("/register-product", json={"name": "X", "batchId": "B1", "details": {}})
        assert resp.status_code == 200
        assert pinning.pinned == [{}]
        assert contract.calls == [("register_product", ("X", "B1", "QmFakeCid1"))]

    def test_pre_pinned_hash_skips_pinning(self, client, contract, pinning):
        resp = client.post("/register-product", json={"name": "X", "batchId": "B1", "ipfsHash": "QmAlready"})
        assert resp.status_code == 200
        assert pinning.pinned == []
        assert contract.calls == [("register_product", ("X", "B1", "QmAlready"))]

    @pytest.mark.parametrize("missing", ["name", "batchId", "details"])
    def test_missing_fields(self, client, contract, missing):
        body = {"name": "X", "batchId": "B1", "details": {"a": 1}}
        del body[missing]
        assert client.post("/register-product", json=body).status_code == 400
        assert contract.calls == []

    def test_pinning_failure_aborts_before_chain_write(self, client, contract, pinning):
        pinning.fail_with = "Invalid authentication"
        resp = client.post("/register-product", json={"name": "X", "batchId": "B1", "details": {"a": 1}})
        assert resp.status_code == 500
        assert resp.get_json() == {"error": "Invalid authentication"}
        assert contract.count("register_product") == 0

    def test_chain_failure_surfaces_reason(self, client, contract):
        contract.fail_with = "Batch already exists"
        resp = client.post("/register-product", json={"name": "X", "batchId": "B1", "details": {"a": 1}})
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "Batch already exists"


class TestTransferAndRevoke:

    def test_transfer(self, client, contract):
        resp = client.post("/transfer-ownership", json={"batchId": 1, "newOwner": DISTRIBUTOR})
        assert resp.status_code == 200
        assert set(resp.get_json()) == {"txHash"}
        assert contract.calls == [("transfer_ownership", (1, DISTRIBUTOR))]

    @pytest.mark.parametrize("body", [{"batchId": 1}, {"newOwner": DISTRIBUTOR}, {}])
    def test_transfer_missing_fields(self, client, contract, body):
        assert client.post("/transfer-ownership", json=body).status_code == 400
        assert contract.calls == []

    @pytest.mark.parametrize("owner", ["not-an-address", "0x1234", "0x" + "g" * 40])
    def test_transfer_malformed_owner(self, client, contract, owner):
        resp = client.post("/transfer-ownership", json={"batchId": 1, "newOwner": owner})
        assert resp.status_code == 400
        assert "newOwner" in resp.get_json()["error"]
        assert contract.calls == []

    def test_revoke_with_reason(self, client, contract):
        resp = client.post("/revoke-batch", json={"batchId": 2, "reason": "contamination"})
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["txHash"].startswith("0x")
        assert contract.calls == [("revoke_batch", (2, "contamination"))]

    def test_revoke_reason_is_optional(self, client, contract):
        assert client.post("/revoke-batch", json={"batchId": "3"}).status_code == 200
        assert contract.calls == [("revoke_batch", (3, ""))]

    @pytest.mark.parametrize("batch_id", [None, 0, -1, "x"])
    def test_revoke_requires_positive_id(self, client, contract, batch_id):
        assert client.post("/revoke-batch", json={"batchId": batch_id}).status_code == 400
        assert contract.calls == []


class TestListing:

    def test_all_batches(self, client):
        body = client.get("/batches").get_json()
        assert body["success"] is True
        assert [b["id"] for b in body["batches"]] == [1, 2]
        assert body["batches"][1]["revokeReason"] == "contamination"

    def test_admin_all_batches_matches(self, client):
        assert client.get("/admin/all-batches").get_json() == client.get("/batches").get_json()

    def test_by_manufacturer(self, client):
        body = client.get(f"/manufacturer/batches?walletAddress={MANUFACTURER}").get_json()
        assert len(body["batches"]) == 2
        body = client.get(f"/manufacturer/batches?walletAddress={DISTRIBUTOR}").get_json()
        assert body["batches"] == []

    def test_by_manufacturer_requires_wallet(self, client):
        resp = client.get("/manufacturer/batches")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "walletAddress is required"}

    def test_by_manufacturer_malformed_wallet(self, client, contract):
        resp = client.get("/manufacturer/batches?walletAddress=garbage")
        assert resp.status_code == 400
        assert resp.get_json() == {"error": "Invalid address: garbage"}
        assert contract.calls == []


class TestMisc:

    def test_health(self, client):
        assert client.get("/health").get_json()["ok"] is True

    def test_unknown_route_is_json(self, client):
        resp = client.get("/does-not-exist")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_pinata_upload(self, client, pinning):
        resp = client.post("/pinata/upload", json={"metadata": {"name": "Amoxicillin"}})
        assert resp.get_json() == {"success": True, "ipfsHash": "QmFakeCid1"}
        assert pinning.pinned == [{"name": "Amoxicillin"}]

    def test_pinata_upload_requires_metadata(self, client, pinning):
        assert client.post("/pinata/upload", json={}).status_code == 400
        assert client.post("/pinata/upload", json={"metadata": None}).status_code == 400
        assert pinning.pinned == []

    def test_pinata_upload_accepts_empty_document(self, client, pinning):
        resp = client.post("/pinata/upload", json={"metadata": {}})
        assert resp.status_code == 200
        assert pinning.pinned == [{}]

    def test_ppb_registry_is_seeded(self, client):
        body = client.get("/api/ppb").get_json()
        assert body["success"] is True
        assert body["total"] == 20
        assert body["data"][0]["licenseNumber"] == "PPB-1001"
        assert client.get("/seeded").get_json() == body
