"""
Asset identities.

An asset is the pair `(policy_id, asset_name)`, both hex strings. The native
currency uses the empty pair.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


POLICY_ID_HEX_LEN = 56
MAX_ASSET_NAME_BYTES = 32

_HEX_RE = re.compile(r"^[0-9a-f]*$")


@dataclass(frozen=True)
class AssetClass:
    policy_id: str
    asset_name: str

    def __post_init__(self) -> None:
        if not isinstance(self.policy_id, str):
            raise TypeError("policy_id must be a str")
        if not isinstance(self.asset_name, str):
            raise TypeError("asset_name must be a str")

        policy_id = self.policy_id.strip().lower()
        asset_name = self.asset_name.strip().lower()
        if not _HEX_RE.match(policy_id) or not _HEX_RE.match(asset_name):
            raise ValueError("policy_id and asset_name must be hex strings")
        if policy_id and len(policy_id) != POLICY_ID_HEX_LEN:
            raise ValueError(f"policy_id must be {POLICY_ID_HEX_LEN} hex chars (or empty for the native asset)")
        if len(asset_name) % 2 != 0:
            raise ValueError("asset_name must have an even number of hex chars")
        if len(asset_name) // 2 > MAX_ASSET_NAME_BYTES:
            raise ValueError(f"asset_name exceeds {MAX_ASSET_NAME_BYTES} bytes")
        if not policy_id and asset_name:
            raise ValueError("the native asset has no asset_name")

        # Canonicalize (frozen dataclass).
        object.__setattr__(self, "policy_id", policy_id)
        object.__setattr__(self, "asset_name", asset_name)

    @property
    def is_native(self) -> bool:
        return self.policy_id == ""

    @property
    def unit(self) -> str:
        """Concatenated `policy_id + asset_name`, or "lovelace" for the native asset."""
        if self.is_native:
            return "lovelace"
        return self.policy_id + self.asset_name

    def to_dict(self) -> dict:
        return {"policy_id": self.policy_id, "asset_name": self.asset_name}

    @classmethod
    def from_dict(cls, data: dict) -> "AssetClass":
        if not isinstance(data, dict):
            raise TypeError("asset must be an object")
        unknown = set(data.keys()) - {"policy_id", "asset_name"}
        if unknown:
            raise ValueError(f"unknown asset fields: {sorted(unknown)}")
        return cls(policy_id=data.get("policy_id", ""), asset_name=data.get("asset_name", ""))


NATIVE_ASSET = AssetClass("", "")
