"""Tests for response payload decoding."""

from __future__ import annotations

from typing import Any, Optional

import pytest
from pydantic import BaseModel

from skyfetch.client.response import decode_payload
from skyfetch.exceptions import DecodingError


class _Item(BaseModel):
    id: int
    name: Optional[str] = None


class TestDecodePayload:
    def test_plain_json(self) -> None:
        assert decode_payload(b'{"a": [1, 2]}') == {"a": [1, 2]}

    def test_model(self) -> None:
        item = decode_payload(b'{"id": 3, "name": "x", "extra": true}', _Item)
        assert item == _Item(id=3, name="x")

    def test_container_shape(self) -> None:
        items = decode_payload(b'[{"id": 1}, {"id": 2}]', list[_Item])
        assert [i.id for i in items] == [1, 2]

    @pytest.mark.parametrize("payload", [b"", b"not json", b"{", b"\xff\xfe"])
    def test_malformed_json(self, payload: bytes) -> None:
        with pytest.raises(DecodingError):
            decode_payload(payload, Any)

    def test_shape_mismatch(self) -> None:
        with pytest.raises(DecodingError) as excinfo:
            decode_payload(b'{"name": "no id"}', _Item)
        assert excinfo.value.message.startswith("Failed to decode data: ")
        assert excinfo.value.cause is not None
