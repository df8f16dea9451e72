# Tests for transcript/results.py
# Created: 2026-10-13

import base64
import json

import pytest

from mcpdeck.transcript.codec import ToolSegment
from mcpdeck.transcript.results import (
    ImageItem,
    ResultBlock,
    ResultShape,
    TextItem,
    classify,
    decode_result,
    decode_results,
    item_from_dict,
)


def _b64json(value) -> str:
    return base64.b64encode(json.dumps(value).encode()).decode()


# ---------------------------------------------------------------------------
# Shape classification
# ---------------------------------------------------------------------------


class TestClassify:
    @pytest.mark.parametrize(
        "value, shape",
        [
            ({"type": "text", "text": "x"}, ResultShape.ITEM),
            ({"type": "image", "data": "x"}, ResultShape.ITEM),
            ({"content": []}, ResultShape.CONTENT),
            ({"content": "not a list"}, ResultShape.OTHER),
            ({"type": "audio"}, ResultShape.OTHER),
            ([1, 2, 3], ResultShape.OTHER),
            ("string", ResultShape.OTHER),
            (None, ResultShape.OTHER),
        ],
    )
    def test_shapes(self, value, shape):
        assert classify(value) is shape


# ---------------------------------------------------------------------------
# Single items
# ---------------------------------------------------------------------------


class TestItemFromDict:
    def test_plain_text(self):
        assert item_from_dict({"type": "text", "text": "hi"}) == TextItem(text="hi")

    def test_json_text_is_formatted(self):
        item = item_from_dict({"type": "text", "text": '{"a": [1, 2]}'})
        assert item.language == "json"
        assert item.text == json.dumps({"a": [1, 2]}, indent=2)

    def test_empty_text_skipped(self):
        assert item_from_dict({"type": "text", "text": ""}) is None

    def test_image_gets_data_uri(self):
        item = item_from_dict({"type": "image", "data": "iVBORw0", "mimeType": "image/png"})
        assert item == ImageItem(data="data:image/png;base64,iVBORw0", mime_type="image/png")

    def test_image_with_data_uri_kept(self):
        uri = "data:image/jpeg;base64,/9j/4AAQ"
        item = item_from_dict({"type": "image", "data": uri, "mimeType": "image/jpeg"})
        assert item.data == uri

    def test_image_requires_mime_type(self):
        assert item_from_dict({"type": "image", "data": "abc"}) is None

    def test_image_requires_data(self):
        assert item_from_dict({"type": "image", "mimeType": "image/png"}) is None

    def test_unknown_type(self):
        assert item_from_dict({"type": "resource", "uri": "file:///x"}) is None

    def test_not_a_dict(self):
        assert item_from_dict("text") is None


# ---------------------------------------------------------------------------
# decode_result
# ---------------------------------------------------------------------------


class TestDecodeResult:
    def test_single_text_item(self):
        items = decode_result(_b64json({"type": "text", "text": "hello"}))
        assert items == [TextItem(text="hello")]

    def test_single_image_item(self):
        items = decode_result(_b64json({"type": "image", "data": "AAA", "mimeType": "image/gif"}))
        assert items == [ImageItem(data="data:image/gif;base64,AAA", mime_type="image/gif")]

    def test_content_array(self):
        fragment = _b64json(
            {
                "content": [
                    {"type": "text", "text": "caption"},
                    {"type": "image", "data": "AAA", "mimeType": "image/png"},
                    {"type": "audio", "data": "BBB"},
                    "junk",
                ],
                "isError": False,
            }
        )
        items = decode_result(fragment)
        assert items == [
            TextItem(text="caption"),
            ImageItem(data="data:image/png;base64,AAA", mime_type="image/png"),
        ]

    def test_empty_content_array(self):
        assert decode_result(_b64json({"content": []})) == []

    def test_unrecognized_json_is_formatted(self):
        value = {"rows": [{"id": 1}], "total": 1}
        items = decode_result(_b64json(value))
        assert items == [TextItem(text=json.dumps(value, indent=2), language="json")]

    def test_unknown_item_type_at_top_level_is_formatted(self):
        items = decode_result(_b64json({"type": "video", "url": "x"}))
        assert len(items) == 1
        assert items[0].language == "json"

    def test_item_missing_fields_emits_nothing(self):
        assert decode_result(_b64json({"type": "image", "data": "AAA"})) == []

    def test_already_decoded_json(self):
        items = decode_result('{"type": "text", "text": "raw"}')
        assert items == [TextItem(text="raw")]

    def test_malformed_base64_falls_back_to_text(self):
        items = decode_result("%%% not base64 %%%")
        assert items == [TextItem(text="%%% not base64 %%%")]

    def test_base64_of_plain_text(self):
        fragment = base64.b64encode(b"Command finished with exit code 0").decode()
        assert decode_result(fragment) == [TextItem(text="Command finished with exit code 0")]

    def test_non_utf8_payload_never_raises(self):
        assert decode_result("////") == [TextItem(text="////")]

    def test_non_ascii_preserved(self):
        items = decode_result(_b64json({"msg": "héllo ✓"}))
        assert "héllo ✓" in items[0].text


class TestDecodeResults:
    def test_single_result_label(self):
        segment = ToolSegment(calls_payload="", result_fragments=[_b64json({"type": "text", "text": "a"})])
        assert decode_results(segment) == [ResultBlock(label="Results", items=[TextItem(text="a")])]

    def test_numbered_labels(self):
        segment = ToolSegment(
            calls_payload="",
            result_fragments=[
                _b64json({"type": "text", "text": "a"}),
                _b64json({"type": "text", "text": "b"}),
            ],
        )
        blocks = decode_results(segment)
        assert [b.label for b in blocks] == ["Results 1", "Results 2"]
        assert blocks[1].items == [TextItem(text="b")]

    def test_no_results(self):
        assert decode_results(ToolSegment(calls_payload="x")) == []
