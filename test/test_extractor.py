"""
Unit tests for the block extractor.

Validates that extract_blocks():
1. Replaces parsed blocks with positional placeholders, in source order
2. Leaves malformed or incomplete-schema blocks as raw text in buffered text
3. Truncates at the first marker left after substitution (streaming policy)
4. Round-trips blocks produced by format_block()
"""
import sys
import os
import logging

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

logging.basicConfig(level=logging.INFO)

from uicp.protocol.extractor import (
    OPEN_MARKER,
    PLACEHOLDER_SPLIT_PATTERN,
    extract_blocks,
    format_block,
    has_blocks,
    placeholder_for,
    placeholder_index,
)
from uicp.protocol.models import ComponentBlock


def block_text(body):
    return f"```uicp\n{body}\n```"


def test_text_without_markers_is_unchanged():
    text = "Just a plain answer with `inline code` and\n```python\nprint(1)\n```"
    result = extract_blocks(text)

    assert result.blocks == []
    assert result.content_with_placeholders == text
    assert result.incomplete is False

    print("PASS: Text without protocol markers passes through untouched")


def test_single_block_replaced_by_placeholder():
    text = 'Hello ' + block_text('{"uid": "NBAGameScore", "data": {"homeTeam": "Lakers"}}') + ' world'
    result = extract_blocks(text)

    assert result.blocks == [ComponentBlock(uid="NBAGameScore", data={"homeTeam": "Lakers"})]
    assert result.content_with_placeholders == "Hello " + placeholder_for(0) + " world"

    print("PASS: Complete block replaced by placeholder 0")


def test_multiple_blocks_keep_order():
    text = (
        "First " + block_text('{"uid": "A", "data": {"n": 1}}')
        + " middle " + block_text('{"data": {"n": 2}, "uid": "B"}')
        + " last"
    )
    result = extract_blocks(text)

    assert [b.uid for b in result.blocks] == ["A", "B"]
    assert result.content_with_placeholders == (
        "First " + placeholder_for(0) + " middle " + placeholder_for(1) + " last"
    )

    print("PASS: Multiple blocks indexed in source order, key order irrelevant")


def test_identical_blocks_get_distinct_placeholders():
    block = block_text('{"uid": "A", "data": {}}')
    result = extract_blocks(f"{block} and {block}")

    assert len(result.blocks) == 2
    assert result.content_with_placeholders == placeholder_for(0) + " and " + placeholder_for(1)

    print("PASS: Repeated identical blocks map to separate placeholders")


def test_malformed_json_left_as_raw_text():
    bad = block_text('{"uid": "A", "data": {')
    text = f"before {bad} after"

    result = extract_blocks(text, truncate_incomplete=False)
    assert result.blocks == []
    assert result.content_with_placeholders == text, "Closed malformed block must fail open"
    assert result.incomplete is False

    # While streaming it cannot be told apart from a block still being written.
    result = extract_blocks(text)
    assert result.blocks == []
    assert result.content_with_placeholders == "before"
    assert result.incomplete is True

    print("PASS: Malformed JSON stays raw in buffered text and is hidden while streaming")


def test_malformed_block_does_not_hide_later_blocks():
    bad = block_text("{not json}")
    good = block_text('{"uid": "X", "data": {}}')
    result = extract_blocks(f"a {bad} b {good} c", truncate_incomplete=False)

    assert [b.uid for b in result.blocks] == ["X"]
    assert result.content_with_placeholders == f"a {bad} b " + placeholder_for(0) + " c"

    print("PASS: A malformed block does not affect later well-formed blocks")


def test_malformed_block_before_unclosed_block_is_truncated():
    text = 'Intro ```uicp\n{bad json}\n``` then ```uicp\n{"uid": "NBAG'
    result = extract_blocks(text)

    assert result.blocks == []
    assert result.content_with_placeholders == "Intro"
    assert OPEN_MARKER not in result.content_with_placeholders
    assert result.incomplete is True

    good = block_text('{"uid": "X", "data": {}}')
    result = extract_blocks(f"A {good} B {block_text('{oops')} C ```uicp\n{{")
    assert [b.uid for b in result.blocks] == ["X"]
    assert result.content_with_placeholders == "A " + placeholder_for(0) + " B"

    print("PASS: Truncation starts at the first marker left after substitution")


def test_blocks_missing_uid_or_data_are_skipped():
    cases = [
        '{"uid": "A"}',
        '{"data": {"x": 1}}',
        '{"uid": "", "data": {}}',
        '{"uid": "A", "data": [1, 2]}',
        '{"uid": 7, "data": {}}',
        '["uid", "data"]',
    ]
    for body in cases:
        text = "x " + block_text(body) + " y"
        result = extract_blocks(text, truncate_incomplete=False)
        assert result.blocks == [], f"Expected no block for {body}"
        assert result.content_with_placeholders == text
        assert extract_blocks(text).content_with_placeholders == "x"

    print("PASS: Blocks without a uid string and data object are left as text")


def test_incomplete_block_is_truncated():
    text = 'Here is the score:\n\n```uicp\n{"uid": "NBAGa'
    result = extract_blocks(text)

    assert result.blocks == []
    assert result.content_with_placeholders == "Here is the score:"
    assert result.incomplete is True
    assert OPEN_MARKER not in result.content_with_placeholders

    print("PASS: Unclosed block truncated with trailing whitespace stripped")


def test_incomplete_block_after_complete_block():
    text = (
        "A " + block_text('{"uid": "X", "data": {}}')
        + ' B \n```uicp\n{"uid": "Y", "data": {"k": "v"}}\n``'
    )
    result = extract_blocks(text)

    assert [b.uid for b in result.blocks] == ["X"]
    assert result.content_with_placeholders == "A " + placeholder_for(0) + " B"
    assert OPEN_MARKER not in result.content_with_placeholders

    print("PASS: Truncation applies after resolving earlier complete blocks")


def test_partial_opening_marker_is_truncated():
    for tail in ("```u", "```ui", "```uic", "```uicp"):
        result = extract_blocks("Loading " + tail)
        assert result.content_with_placeholders == "Loading", f"Not truncated for {tail!r}"
        assert result.incomplete is True

    # A bare fence may close an ordinary code block; keep it.
    result = extract_blocks("Loading ```")
    assert result.content_with_placeholders == "Loading ```"
    assert result.incomplete is False

    print("PASS: Partially written opening marker is hidden")


def test_truncation_can_be_disabled_for_buffered_text():
    text = "Wrap payloads in a ```uicp fence to embed components."
    assert extract_blocks(text).content_with_placeholders == "Wrap payloads in a"

    result = extract_blocks(text, truncate_incomplete=False)
    assert result.content_with_placeholders == text
    assert result.incomplete is False

    print("PASS: truncate_incomplete=False keeps literal markers in buffered text")


def test_extraction_is_deterministic():
    text = "x " + block_text('{"uid": "A", "data": {"v": [1, 2, 3]}}') + ' y ```uicp\n{"ui'
    first = extract_blocks(text)
    second = extract_blocks(text)

    assert first == second
    print("PASS: Identical input yields identical extraction")


def test_literal_placeholder_text_cannot_collide():
    forged = placeholder_for(5)
    text = f"spoof {forged} " + block_text('{"uid": "A", "data": {}}')
    result = extract_blocks(text)

    tokens = PLACEHOLDER_SPLIT_PATTERN.findall(result.content_with_placeholders)
    assert tokens == [placeholder_for(0)], f"Unexpected placeholder tokens: {tokens!r}"

    print("PASS: Placeholder look-alikes in content are neutralised")


def test_placeholder_index():
    assert placeholder_index(placeholder_for(12)) == 12
    assert placeholder_index("UICP_BLOCK_12") is None
    assert placeholder_index("text " + placeholder_for(1)) is None

    print("PASS: placeholder_index recognises exact tokens only")


def test_format_block_round_trip():
    data = {
        "homeTeam": "Lakers",
        "awayTeam": "Celtics",
        "homeScore": 112,
        "awayScore": 108,
        "note": "Use ``` fences ✓",
        "nested": {"list": [1, None, True]},
    }
    block = format_block("NBAGameScore", data)

    assert block.startswith("```uicp\n")
    assert block.endswith("\n```")

    result = extract_blocks(f"Final score: {block} What a game!")
    assert len(result.blocks) == 1
    assert result.blocks[0].uid == "NBAGameScore"
    assert result.blocks[0].data == data

    print("PASS: format_block output round-trips through extract_blocks")


def test_has_blocks():
    assert has_blocks("x ```uicp\n{}")
    assert has_blocks(block_text('{"uid": "A", "data": {}}'))
    assert not has_blocks("```python\nprint()\n```")

    print("PASS: has_blocks detects complete and incomplete blocks")


if __name__ == "__main__":
    tests = [
        test_text_without_markers_is_unchanged,
        test_single_block_replaced_by_placeholder,
        test_multiple_blocks_keep_order,
        test_identical_blocks_get_distinct_placeholders,
        test_malformed_json_left_as_raw_text,
        test_malformed_block_does_not_hide_later_blocks,
        test_malformed_block_before_unclosed_block_is_truncated,
        test_blocks_missing_uid_or_data_are_skipped,
        test_incomplete_block_is_truncated,
        test_incomplete_block_after_complete_block,
        test_partial_opening_marker_is_truncated,
        test_truncation_can_be_disabled_for_buffered_text,
        test_extraction_is_deterministic,
        test_literal_placeholder_text_cannot_collide,
        test_placeholder_index,
        test_format_block_round_trip,
        test_has_blocks,
    ]

    passed = 0
    failed = 0
    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"FAIL: {test.__name__}: {e}")
            failed += 1

    print(f"\n{'='*50}")
    print(f"Results: {passed} passed, {failed} failed out of {len(tests)} tests")
    if failed == 0:
        print("All tests passed!")
    else:
        sys.exit(1)
