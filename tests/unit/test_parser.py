"""Incremental parser tests with property-based testing."""

import json

import pytest
from hypothesis import given, strategies as st

from specstream.errors import DuplicateKeyError, MalformedSyntaxError
from specstream.parser import IncrementalParser, ObjectNode, StringNode, from_value


def feed_all(chunks, **kwargs):
    parser = IncrementalParser(**kwargs)
    for chunk in chunks:
        parser.feed(chunk)
    return parser


@pytest.mark.unit
def test_parse_complete_document():
    """Test parsing a document in one chunk."""
    parser = feed_all(['{"a": 1, "b": [true, null, "x"], "c": {"d": -2.5e3}}'])

    assert parser.document_complete
    assert parser.root.complete
    assert parser.root.to_value() == {"a": 1, "b": [True, None, "x"], "c": {"d": -2500.0}}


@pytest.mark.unit
def test_open_string_exposes_prefix():
    """Test an unterminated string exposes the characters so far."""
    parser = feed_all(['{"text": "Hel'])

    node = parser.root.get("text")
    assert isinstance(node, StringNode)
    assert node.value == "Hel"
    assert not node.complete

    parser.feed('lo"')
    assert node.value == "Hello"
    assert node.complete
    assert not parser.document_complete


@pytest.mark.unit
def test_number_waits_for_delimiter():
    """Test a number is only exposed once a delimiter follows."""
    parser = feed_all(['{"n": 12'])
    assert parser.root.to_value() == {}

    parser.feed(".5")
    assert parser.root.to_value() == {}

    parser.feed("}")
    assert parser.root.to_value() == {"n": 12.5}


@pytest.mark.unit
def test_partial_literal_not_exposed():
    """Test literals appear only once complete."""
    parser = feed_all(['{"a": [tr'])
    assert parser.root.to_value() == {"a": []}

    parser.feed("ue, fal")
    assert parser.root.to_value() == {"a": [True]}

    parser.feed("se]")
    assert parser.root.to_value() == {"a": [True, False]}


@pytest.mark.unit
def test_pending_key_maps_to_none():
    """Test a key whose value has not started is present but empty."""
    parser = feed_all(['{"a": 1, "b":'])

    assert "b" in parser.root.entries
    assert parser.root.get("b") is None
    assert parser.root.to_value() == {"a": 1}


@pytest.mark.unit
def test_escape_split_across_chunks():
    """Test escapes and unicode escapes split at every position."""
    parser = feed_all(['{"s": "a\\', 'n\\u00', 'e9\\ud83c', '\\udf32b"}'])

    assert parser.root.to_value() == {"s": "a\né\U0001f332b"}


@pytest.mark.unit
def test_partial_escape_never_exposed():
    """Test a half-received escape does not leak into the value."""
    parser = feed_all(['{"s": "ab\\u00'])

    assert parser.root.get("s").value == "ab"


@pytest.mark.unit
def test_lone_surrogate_is_kept():
    """Test an unpaired high surrogate is emitted as-is."""
    parser = feed_all(['{"s": "\\ud83cx"}'])

    assert parser.root.to_value() == {"s": "\ud83cx"}


@pytest.mark.unit
def test_preamble_skipped_by_default():
    """Test text before the first brace is skipped."""
    parser = feed_all(['Here you go:\n```json\n{"a": 1}\n```'])

    assert parser.root.to_value() == {"a": 1}
    assert parser.document_complete
    assert parser.trailing_chars == 3


@pytest.mark.unit
def test_preamble_rejected_when_disabled():
    """Test strict mode refuses text before the value."""
    parser = IncrementalParser(skip_preamble=False)

    with pytest.raises(MalformedSyntaxError):
        parser.feed('x{"a": 1}')


@pytest.mark.unit
def test_trailing_text_counted():
    """Test non-whitespace after the document is counted, not parsed."""
    parser = feed_all(['{"a": 1}  \n', "garbage"])
    parser.finish()

    assert parser.root.to_value() == {"a": 1}
    assert parser.trailing_chars == 7


@pytest.mark.unit
def test_duplicate_key_raises():
    """Test a repeated member name in one object is fatal."""
    parser = IncrementalParser()
    parser.feed('{"a": 1, ')

    with pytest.raises(DuplicateKeyError) as exc_info:
        parser.feed('"a": 2}')

    assert exc_info.value.key == "a"
    assert exc_info.value.offset == 11


@pytest.mark.unit
def test_same_key_in_different_objects_allowed():
    """Test duplicate detection is per object."""
    parser = feed_all(['{"a": {"a": 1}, "b": {"a": 2}}'])

    assert parser.root.to_value() == {"a": {"a": 1}, "b": {"a": 2}}


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, offset",
    [
        ('{"a" 1}', 5),
        ('{"a": 1,, "b": 2}', 8),
        ('{"a": 01}', 8),
        ('{"a": -}', 7),
        ('{"a": trux}', 9),
        ('{"a": "x\ny"}', 8),
        ('{"a": "\\q"}', 8),
        ('{"a": [1}', 8),
        ("{1: 2}", 1),
    ],
)
def test_malformed_syntax(text, offset):
    """Test structural corruption raises with the character offset."""
    parser = IncrementalParser()

    with pytest.raises(MalformedSyntaxError) as exc_info:
        parser.feed(text)

    assert exc_info.value.offset == offset


@pytest.mark.unit
def test_offset_spans_chunks():
    """Test error offsets count characters across all chunks."""
    parser = feed_all(['{"a": ', "[1, 2"])

    with pytest.raises(MalformedSyntaxError) as exc_info:
        parser.feed("}")

    assert exc_info.value.offset == 11


@pytest.mark.unit
def test_max_depth():
    """Test nesting beyond the limit is rejected."""
    parser = IncrementalParser(max_depth=3)
    parser.feed('{"a": {"b": ')

    with pytest.raises(MalformedSyntaxError):
        parser.feed('{"c": {}}}}')


@pytest.mark.unit
def test_finish_leaves_truncated_document_incomplete():
    """Test cancellation is not an error."""
    parser = feed_all(['{"a": {"b": "tex'])
    parser.finish()

    assert parser.finished
    assert not parser.document_complete
    assert parser.root.to_value() == {"a": {"b": "tex"}}

    with pytest.raises(RuntimeError):
        parser.feed("t")


@pytest.mark.unit
def test_stamps_track_changes():
    """Test stamps mark the nodes touched by each feed."""
    parser = feed_all(['{"a": {"x": 1}, "b": {"y": "'])
    a = parser.root.get("a")
    b = parser.root.get("b")
    assert a.stamp == 1
    assert b.stamp == 1

    parser.feed("more")

    assert parser.generation == 2
    assert a.stamp == 1
    assert b.stamp == 2
    assert parser.root.stamp == 2


@pytest.mark.unit
def test_from_value_builds_complete_tree():
    """Test decoded values convert to complete nodes."""
    node = from_value({"a": [1, "x", {"b": None}]}, stamp=3)

    assert isinstance(node, ObjectNode)
    assert node.complete
    assert node.stamp == 3
    assert node.to_value() == {"a": [1, "x", {"b": None}]}


json_values = st.recursive(
    st.none()
    | st.booleans()
    | st.integers(min_value=-(10**12), max_value=10**12)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(),
    lambda children: st.lists(children, max_size=4)
    | st.dictionaries(st.text(max_size=6), children, max_size=4),
    max_leaves=20,
)


@given(st.dictionaries(st.text(max_size=6), json_values, max_size=5), st.data())
def test_any_chunking_matches_full_decode(document, data):
    """Property test: split points never change the parsed value."""
    text = json.dumps(document, ensure_ascii=data.draw(st.booleans()))
    cuts = sorted(data.draw(st.lists(st.integers(0, len(text)), max_size=8)))
    chunks = [text[i:j] for i, j in zip([0] + cuts, cuts + [len(text)])]

    parser = feed_all(chunks)

    assert parser.document_complete
    assert parser.root.to_value() == json.loads(text)


@given(st.dictionaries(st.text(max_size=6), json_values, max_size=5), st.data())
def test_prefix_never_raises(document, data):
    """Property test: any prefix of a valid document parses without error."""
    text = json.dumps(document)
    end = data.draw(st.integers(0, len(text)))

    parser = feed_all([text[:end]])
    parser.finish()

    assert parser.document_complete == (end == len(text))
