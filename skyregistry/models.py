"""
Wire models for the portal registry endpoint.

RegistryEntryResponse decodes a lookup response; byte fields arrive as
hex strings. PublishRequest is the body of a publish; byte fields are
sent as JSON arrays of integers.
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from .entry import MAX_REVISION, SignedRegistryEntry
from .keys import SIGNATURE_SIZE, PublicKey
from .util import hex_decode


class RegistryEntryResponse(BaseModel):
    """Body returned by a registry lookup."""
    data: bytes
    revision: int = Field(ge=0, le=MAX_REVISION, strict=True)
    signature: bytes

    @field_validator("data", "signature", mode="before")
    @classmethod
    def _decode_hex(cls, value):
        return hex_decode(value)

    @field_validator("signature")
    @classmethod
    def _check_signature_size(cls, value: bytes) -> bytes:
        if len(value) != SIGNATURE_SIZE:
            raise ValueError(f"signature must be {SIGNATURE_SIZE} bytes, got {len(value)}")
        return value


class PublicKeyModel(BaseModel):
    algorithm: str
    key: List[int]


class PublishRequest(BaseModel):
    """Body of a registry publish."""
    publickey: PublicKeyModel
    datakey: str
    revision: int
    data: List[int]
    signature: List[int]

    @classmethod
    def from_signed_entry(
        cls,
        public_key: PublicKey,
        signed: SignedRegistryEntry,
        already_hashed: bool = False
    ) -> 'PublishRequest':
        return cls(
            publickey=PublicKeyModel(**public_key.to_json()),
            datakey=signed.entry.hashed_data_key(already_hashed),
            revision=signed.entry.revision,
            data=list(signed.entry.data),
            signature=list(signed.signature),
        )
