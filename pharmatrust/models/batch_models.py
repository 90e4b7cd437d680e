# pharmatrust/models/batch_models.py
import logging
from dataclasses import dataclass, asdict, field
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)


def _to_int(x, name: str = "value") -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        logger.warning("Chain struct field %s is not an integer (%r); using 0", name, x)
        return 0


def _field(raw: Any, name: str, index: int, default: Any = None) -> Any:
    """
    web3 hands structs back as tuples, or as AttributeDict/dict when the
    ABI carries component names. Support both.
    """
    if isinstance(raw, dict):
        return raw.get(name, default)
    if hasattr(raw, name) and not isinstance(raw, (list, tuple)):
        return getattr(raw, name)
    if isinstance(raw, (list, tuple)) and len(raw) > index:
        return raw[index]
    return default


@dataclass
class Batch:
    id: int = 0
    name: str = ""
    batchNumber: str = ""
    ipfsHash: str = ""
    manufacturer: str = ""
    currentOwner: str = ""
    revoked: bool = False
    timestamp: int = 0
    revokeReason: str = ""

    @classmethod
    def from_chain(cls, raw: Any) -> "Batch":
        # struct order: id, name, batchNumber, ipfsHash, manufacturer,
        #               currentOwner, revoked, timestamp, revokeReason
        return cls(
            id=_to_int(_field(raw, "id", 0, 0), "id"),
            name=_field(raw, "name", 1, "") or "",
            batchNumber=str(_field(raw, "batchNumber", 2, "") or ""),
            ipfsHash=_field(raw, "ipfsHash", 3, "") or "",
            manufacturer=_field(raw, "manufacturer", 4, "") or "",
            currentOwner=_field(raw, "currentOwner", 5, "") or "",
            revoked=bool(_field(raw, "revoked", 6, False)),
            timestamp=_to_int(_field(raw, "timestamp", 7, 0), "timestamp"),
            revokeReason=_field(raw, "revokeReason", 8, "") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class VerificationResult:
    valid: bool = False
    owner: str = ""
    revoked: bool = False
    history: List[str] = field(default_factory=list)

    @classmethod
    def from_chain(cls, raw: Any) -> "VerificationResult":
        history = _field(raw, "history", 3, []) or []
        return cls(
            valid=bool(_field(raw, "valid", 0, False)),
            owner=_field(raw, "owner", 1, "") or "",
            revoked=bool(_field(raw, "revoked", 2, False)),
            history=[str(h) for h in history],
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ChainUser:
    exists: bool = False
    name: str = ""
    role: int = 0
    wallet: str = ""

    @classmethod
    def from_chain(cls, raw: Any) -> "ChainUser":
        return cls(
            exists=bool(_field(raw, "exists", 0, False)),
            name=_field(raw, "name", 1, "") or "",
            role=_to_int(_field(raw, "role", 2, 0), "role"),
            wallet=_field(raw, "wallet", 3, "") or "",
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def project_batches(rows: Sequence[Any]) -> List[Batch]:
    return [Batch.from_chain(r) for r in rows or []]
