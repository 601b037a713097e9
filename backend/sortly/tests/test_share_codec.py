"""
Share codec tests
"""

import base64
import json
import re
import zlib

import pytest

from shared.exceptions.sortly import ShareDecodeError
from shared.interfaces.capabilities import TextCompressor
from shared.models.sortly import SharedPayload, SortDataset, SortRule
from sortly.services.compression import ZlibTextCompressor
from sortly.services.share_codec import ShareCodec, build_share_url, from_base64url, to_base64url


class _RecordingCompressor(TextCompressor):
    """Identity compressor that records calls"""

    def __init__(self) -> None:
        self.deflated = []
        self.inflated = []

    async def deflate(self, data: bytes) -> bytes:
        self.deflated.append(data)
        return data

    async def inflate(self, data: bytes) -> bytes:
        self.inflated.append(data)
        return data


def _token_for(raw: bytes) -> str:
    return base64.urlsafe_b64encode(zlib.compress(raw)).decode("ascii").rstrip("=")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        [],
        {"columns": [], "rows": []},
        {"columns": ["이름", "Ville"], "rows": [{"이름": "김철수", "Ville": "Zürich 🚀"}]},
        {"nested": {"deep": [1, 2.5, True, False, None, {"x": ["y"]}]}},
        "plain string",
        0,
        None,
    ],
)
async def test_round_trip(payload):
    codec = ShareCodec()

    token = await codec.encode(payload)

    assert re.fullmatch(r"[A-Za-z0-9_-]*", token)
    assert await codec.decode(token) == payload


@pytest.mark.asyncio
async def test_token_is_zlib_of_compact_json():
    codec = ShareCodec()
    payload = {"columns": ["a"], "rows": [{"a": "é"}]}

    token = await codec.encode(payload)

    raw = zlib.decompress(from_base64url(token))
    assert raw.decode("utf-8") == '{"columns":["a"],"rows":[{"a":"é"}]}'


@pytest.mark.asyncio
async def test_decodes_token_from_other_encoder():
    payload = {"columns": ["n"], "rows": [{"n": "1"}], "sortRules": []}
    token = _token_for(json.dumps(payload).encode("utf-8"))

    assert await ShareCodec().decode(token) == payload


@pytest.mark.asyncio
async def test_uses_injected_compressor():
    compressor = _RecordingCompressor()
    codec = ShareCodec(compressor=compressor)

    token = await codec.encode({"k": "v"})

    assert compressor.deflated == [b'{"k":"v"}']
    assert await codec.decode(token) == {"k": "v"}
    assert compressor.inflated == [b'{"k":"v"}']


@pytest.mark.asyncio
async def test_corrupted_trailing_characters_fail():
    codec = ShareCodec()
    token = await codec.encode({"columns": ["a"], "rows": [{"a": "1"}, {"a": "2"}]})

    for corrupted in (token[:-3] + "AAA", token[:-2], token + "Zz", token[:-1] + ("A" if token[-1] != "A" else "B")):
        with pytest.raises(ShareDecodeError):
            await codec.decode(corrupted)


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "!!!!", "abc+/def", "a", "abc def"])
async def test_malformed_base64_fails(token):
    with pytest.raises(ShareDecodeError):
        await ShareCodec().decode(token)


@pytest.mark.asyncio
async def test_invalid_utf8_fails():
    token = _token_for(b"\xff\xfe\xfd")

    with pytest.raises(ShareDecodeError) as exc_info:
        await ShareCodec().decode(token)

    assert exc_info.value.stage == "utf8"


@pytest.mark.asyncio
@pytest.mark.parametrize("raw", [b"{not json", b"NaN", b'{"a": Infinity}'])
async def test_invalid_json_fails(raw):
    with pytest.raises(ShareDecodeError) as exc_info:
        await ShareCodec().decode(_token_for(raw))

    assert exc_info.value.stage == "json"
    assert exc_info.value.code == "SHARE_DECODE_FAILURE"


@pytest.mark.asyncio
async def test_deeply_nested_json_fails_as_decode_error():
    token = _token_for(b"[" * 200_000 + b"]" * 200_000)

    with pytest.raises(ShareDecodeError) as exc_info:
        await ShareCodec().decode(token)

    assert exc_info.value.stage == "json"


@pytest.mark.asyncio
async def test_inflate_output_is_capped():
    codec = ShareCodec(ZlibTextCompressor(max_output_bytes=1_000))
    within = _token_for(json.dumps(" " * 900).encode("utf-8"))
    exact = _token_for(json.dumps("x" * 998).encode("utf-8"))
    oversized = _token_for(json.dumps(" " * 50_000).encode("utf-8"))

    assert await codec.decode(within) == " " * 900
    assert await codec.decode(exact) == "x" * 998
    with pytest.raises(ShareDecodeError) as exc_info:
        await codec.decode(oversized)

    assert exc_info.value.stage == "inflate"
    assert await ShareCodec().decode(oversized) == " " * 50_000


@pytest.mark.asyncio
async def test_decode_shared_dataset_requires_columns_and_rows():
    codec = ShareCodec()

    for payload in ({"rows": []}, {"columns": []}, [1, 2], {"columns": "a", "rows": []}):
        token = await codec.encode(payload)
        with pytest.raises(ShareDecodeError) as exc_info:
            await codec.decode_shared_dataset(token)
        assert exc_info.value.stage == "validate"


@pytest.mark.asyncio
async def test_decode_shared_dataset():
    codec = ShareCodec()
    token = await codec.encode(
        {
            "columns": ["n"],
            "rows": [{"n": "b"}],
            "sortRules": [{"column": "n", "direction": "desc", "type": "alpha"}],
            "label": "Letters",
        }
    )

    payload = await codec.decode_shared_dataset(token)

    assert payload.columns == ["n"]
    assert payload.sort_rules == [SortRule(column="n", direction="desc", type="alpha")]
    assert payload.label == "Letters"


@pytest.mark.asyncio
async def test_encode_dataset_sorts_rows_and_omits_missing_label():
    codec = ShareCodec()
    dataset = SortDataset(
        columns=["n"],
        rows=[{"n": "b"}, {"n": "a"}],
        sort_rules=[SortRule(column="n")],
    )

    token = await codec.encode_dataset(dataset)
    decoded = await codec.decode(token)

    assert decoded == {
        "columns": ["n"],
        "rows": [{"n": "a"}, {"n": "b"}],
        "sortRules": [{"column": "n", "direction": "asc", "type": "alpha"}],
    }
    assert isinstance(await codec.decode_shared_dataset(token), SharedPayload)


def test_base64url_helpers():
    assert to_base64url(b"\xfb\xff") == "-_8"
    assert from_base64url("-_8") == b"\xfb\xff"


def test_build_share_url():
    assert build_share_url("abc", "https://sortly.app/") == "https://sortly.app/s/abc"
