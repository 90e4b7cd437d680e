# pharmatrust/blockchain.py
"""
Contract client for the PharmaTrustChain batch registry.

One ContractClient is built at startup (init_blockchain) and stored in
app.config["CONTRACT_CLIENT"]; services get it passed in rather than
importing module-level web3 handles.

Every write:
  build -> sign -> send -> wait_for_transaction_receipt
and only returns once the receipt says status == 1.
"""

from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Dict, List, Optional

from web3 import Web3

from pharmatrust.errors import ExternalServiceError, ValidationError, extract_reason
from pharmatrust.models.batch_models import Batch, ChainUser, VerificationResult, project_batches

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------
# Helpers
# -------------------------------------------------------------------
def normalize_private_key(pk: str) -> str:
    pk = (pk or "").strip().replace(" ", "").replace("\n", "").replace("\r", "")
    hexpart = pk[2:] if pk.lower().startswith("0x") else pk
    if len(hexpart) != 64:
        raise ValueError(f"Private key must be 64 hex chars; got {len(hexpart)}")
    if not re.fullmatch(r"[0-9a-fA-F]{64}", hexpart):
        raise ValueError("Private key contains non-hex characters")
    return "0x" + hexpart


def load_abi(path: str) -> List[Dict[str, Any]]:
    """
    Accepts a Hardhat/Truffle artifact ({"abi": [...]}) or a bare ABI list.
    Relative paths are tried against the cwd and the project root.
    """
    here = os.path.dirname(__file__)
    candidates = [path] if os.path.isabs(path) else [
        os.path.join(os.getcwd(), path),
        os.path.join(here, "..", path),
    ]
    for p in candidates:
        p = os.path.abspath(p)
        if os.path.exists(p):
            with open(p, "r", encoding="utf-8") as f:
                data = json.load(f)
            return data["abi"] if isinstance(data, dict) else data
    raise RuntimeError(f"Contract ABI not found at: {path}")


def _raw_tx_bytes(signed) -> bytes:
    """Support different eth-account versions exposing raw tx bytes."""
    raw = getattr(signed, "raw_transaction", None)
    if raw is None:
        raw = getattr(signed, "rawTransaction", None)
    if raw is None:
        raise TypeError("SignedTransaction has no raw tx bytes")
    return raw


class ContractClient:

    def __init__(self, web3: Web3, contract, account, tx_timeout: int = 180):
        self.web3 = web3
        self.contract = contract
        self.account = account
        self.tx_timeout = tx_timeout

    @classmethod
    def from_config(cls, rpc_url: str, private_key: str, contract_address: str,
                    abi: List[Dict[str, Any]], tx_timeout: int = 180) -> "ContractClient":
        web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": 30}))
        account = web3.eth.account.from_key(normalize_private_key(private_key))
        contract = web3.eth.contract(address=Web3.to_checksum_address(contract_address), abi=abi)
        return cls(web3, contract, account, tx_timeout=tx_timeout)

    # -------------------------------------------------------------------
    # Transaction plumbing
    # -------------------------------------------------------------------
    def _fee_fields(self) -> Dict[str, int]:
        """EIP-1559 fees via fee_history, legacy gasPrice if the node has none."""
        try:
            hist = self.web3.eth.fee_history(5, "latest", [10, 50, 90])
            base = (hist.get("baseFeePerGas") or [0])[-1]
            if not base:
                raise ValueError("node reports no base fee")
            tips = [r[-1] for r in hist.get("reward", []) if r]
            prio = max(tips) if tips else self.web3.to_wei(1, "gwei")
            return {"maxPriorityFeePerGas": prio, "maxFeePerGas": int(base * 1.25 + prio)}
        except Exception as e:
            logger.debug("fee_history unavailable (%s); using legacy gas price", e)
            return {"gasPrice": self.web3.eth.gas_price}

    def _transact(self, label: str, fn) -> str:
        try:
            sender = self.account.address
            gas_est = fn.estimate_gas({"from": sender})
            tx = fn.build_transaction({
                "from": sender,
                "nonce": self.web3.eth.get_transaction_count(sender, "pending"),
                "chainId": self.web3.eth.chain_id,
                "gas": int(gas_est * 1.20),
                **self._fee_fields(),
            })
            signed = self.account.sign_transaction(tx)
            tx_hash = self.web3.eth.send_raw_transaction(_raw_tx_bytes(signed))
            tx_hex = self.web3.to_hex(tx_hash)
            logger.info("%s sent: %s", label, tx_hex)

            receipt = self.web3.eth.wait_for_transaction_receipt(tx_hash, timeout=self.tx_timeout)
        except ExternalServiceError:
            raise
        except Exception as e:
            logger.error("%s failed: %s", label, e)
            raise ExternalServiceError(extract_reason(e, f"{label} failed")) from e

        if not receipt or receipt["status"] != 1:
            raise ExternalServiceError(f"{label} transaction reverted: {tx_hex}")

        logger.info("%s confirmed in block %s", label, receipt["blockNumber"])
        return tx_hex

    def _call(self, label: str, fn) -> Any:
        try:
            return fn.call()
        except Exception as e:
            logger.error("%s() failed: %s", label, e)
            raise ExternalServiceError(extract_reason(e, f"{label} failed")) from e

    def _address(self, value: str) -> str:
        try:
            return Web3.to_checksum_address(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(f"Invalid address: {value}") from e

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def verify_batch(self, batch_id: int) -> VerificationResult:
        raw = self._call("verifyBatch", self.contract.functions.verifyBatch(batch_id))
        return VerificationResult.from_chain(raw)

    def login(self, wallet: str) -> ChainUser:
        raw = self._call("login", self.contract.functions.login(self._address(wallet)))
        return ChainUser.from_chain(raw)

    def get_all_batches(self) -> List[Batch]:
        return project_batches(self._call("getAllBatches", self.contract.functions.getAllBatches()))

    def get_batches_by_manufacturer(self, wallet: str) -> List[Batch]:
        fn = self.contract.functions.getBatchesByManufacturer(self._address(wallet))
        return project_batches(self._call("getBatchesByManufacturer", fn))

    # -------------------------------------------------------------------
    # Writes (confirmed before returning)
    # -------------------------------------------------------------------
    def register_product(self, name: str, batch_number: str, ipfs_hash: str) -> str:
        fn = self.contract.functions.registerProduct(name, batch_number, ipfs_hash)
        return self._transact("registerProduct", fn)

    def transfer_ownership(self, batch_id: int, new_owner: str) -> str:
        fn = self.contract.functions.transferOwnership(batch_id, self._address(new_owner))
        return self._transact("transferOwnership", fn)

    def revoke_batch(self, batch_id: int, reason: str = "") -> str:
        fn = self.contract.functions.revokeBatch(batch_id, reason or "")
        return self._transact("revokeBatch", fn)

    def register_user(self, wallet: str, name: str, role: int) -> str:
        fn = self.contract.functions.registerUser(self._address(wallet), name, int(role))
        return self._transact("registerUser", fn)


# -------------------------------------------------------------------
# App wiring (used by create_app)
# -------------------------------------------------------------------
def init_blockchain(app: Any, client: Optional[ContractClient] = None) -> ContractClient:
    """
    Attach a ContractClient to app.config["CONTRACT_CLIENT"].
    A pre-built client (tests, scripts) is used as-is.
    """
    if client is None:
        for key in ("GANACHE_RPC", "PRIVATE_KEY", "CONTRACT_ADDRESS"):
            if not app.config.get(key):
                raise RuntimeError(f"{key} missing in environment")

        client = ContractClient.from_config(
            rpc_url=app.config["GANACHE_RPC"],
            private_key=app.config["PRIVATE_KEY"],
            contract_address=app.config["CONTRACT_ADDRESS"],
            abi=load_abi(app.config["CONTRACT_ABI_PATH"]),
            tx_timeout=app.config.get("CHAIN_TX_TIMEOUT", 180),
        )
        app.logger.info("Blockchain wired: rpc=%s", app.config["GANACHE_RPC"])
        app.logger.info("  • Account: %s", client.account.address)
        app.logger.info("  • Contract: %s", client.contract.address)

    app.config["CONTRACT_CLIENT"] = client
    return client
