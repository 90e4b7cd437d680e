# pharmatrust/models/request_models.py
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, field_validator, model_validator
from web3 import Web3


class _Body(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class SignupModel(_Body):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    role: int = Field(..., ge=1, le=3)
    walletAddress: str = Field(..., min_length=1)
    licenseNumber: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def _loose_email(cls, v: str) -> str:
        if "@" not in v or " " in v:
            raise ValueError("invalid email format (expected something like user@host)")
        return v


class LoginModel(_Body):
    walletAddress: str = Field(..., min_length=1)


class RegisterProductModel(_Body):
    name: str = Field(..., min_length=1)
    batchId: str = Field(..., min_length=1)
    details: Optional[Any] = None
    ipfsHash: Optional[str] = None

    @field_validator("batchId", mode="before")
    @classmethod
    def _batch_as_text(cls, v):
        # batch numbers arrive as either JSON numbers or strings
        if isinstance(v, bool):
            raise ValueError("batchId must be a string or number")
        if isinstance(v, int):
            return str(v)
        return v

    @model_validator(mode="after")
    def _details_or_hash(self):
        if self.details is None and not self.ipfsHash:
            raise ValueError("Missing fields: name, batchId, details")
        return self


class TransferOwnershipModel(_Body):
    batchId: PositiveInt
    newOwner: str = Field(..., min_length=1)

    @field_validator("newOwner")
    @classmethod
    def _owner_is_address(cls, v: str) -> str:
        if not Web3.is_address(v):
            raise ValueError("newOwner must be a 0x-prefixed 20-byte address")
        return v


class RevokeBatchModel(_Body):
    batchId: PositiveInt
    reason: str = ""

    @field_validator("reason", mode="before")
    @classmethod
    def _none_reason(cls, v):
        return v or ""


class PinataUploadModel(_Body):
    metadata: Any

    @field_validator("metadata")
    @classmethod
    def _present(cls, v):
        if v is None:
            raise ValueError("metadata is required")
        return v
