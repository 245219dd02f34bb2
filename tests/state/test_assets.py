from __future__ import annotations

import pytest

from ammcore.state.assets import NATIVE_ASSET, AssetClass


def test_asset_class_canonicalizes_case() -> None:
    a = AssetClass("AB" * 28, "50554B5559")
    assert a.policy_id == "ab" * 28
    assert a.asset_name == "50554b5559"
    assert a == AssetClass("ab" * 28, "50554b5559")
    assert a.unit == "ab" * 28 + "50554b5559"


def test_native_asset() -> None:
    assert NATIVE_ASSET.is_native
    assert NATIVE_ASSET.unit == "lovelace"


@pytest.mark.parametrize(
    "policy_id,asset_name",
    [
        ("ab" * 27, ""),  # short policy id
        ("zz" * 28, ""),  # not hex
        ("ab" * 28, "abc"),  # odd-length name
        ("ab" * 28, "00" * 33),  # name too long
        ("", "00"),  # native asset with a name
    ],
)
def test_asset_class_rejects_malformed(policy_id: str, asset_name: str) -> None:
    with pytest.raises(ValueError):
        AssetClass(policy_id, asset_name)


def test_asset_dict_roundtrip() -> None:
    a = AssetClass("cd" * 28, "")
    assert AssetClass.from_dict(a.to_dict()) == a
    with pytest.raises(ValueError):
        AssetClass.from_dict({"policy_id": "cd" * 28, "extra": 1})
