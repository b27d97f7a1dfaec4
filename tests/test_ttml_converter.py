"""Tests for the TTML to SRT converter."""

import logging

import pytest

from ttml2srt import CueError, ParseError, convert
from ttml2srt.processing.ttml_converter import TTMLConverter, extract_text, parse_document

TTML_NAMESPACED = """<?xml version="1.0" encoding="UTF-8"?>
<tt xmlns="http://www.w3.org/ns/ttml" xml:lang="en">
  <body>
    <div>
      <p begin="00:00:01.000" end="00:00:02.000">First</p>
      <p begin="00:00:03.250" end="00:00:04.750">Second</p>
      <p begin="00:00:05.000" dur="00:00:01.500">Third</p>
    </div>
  </body>
</tt>
"""


def _blocks(srt_text: str) -> list[list[str]]:
    return [block.split("\n") for block in srt_text.strip("\n").split("\n\n")]


class TestConvertEndToEnd:
    """End-to-end behaviour of convert()."""

    def test_single_cue_exact_output(self) -> None:
        """Test the exact SRT text for a single cue."""
        result = convert('<p begin="00:00:01.000" end="00:00:02.000">Hi</p>')
        assert result == "1\n00:00:01,000 --> 00:00:02,000\nHi\n\n"

    def test_namespaced_document(self) -> None:
        """Test that p elements in the TTML namespace are found."""
        blocks = _blocks(convert(TTML_NAMESPACED))

        assert len(blocks) == 3
        assert blocks[0] == ["1", "00:00:01,000 --> 00:00:02,000", "First"]
        assert blocks[1] == ["2", "00:00:03,250 --> 00:00:04,750", "Second"]
        assert blocks[2] == ["3", "00:00:05,000 --> 00:00:06,500", "Third"]

    def test_block_count_matches_p_elements(self) -> None:
        """Test that every timed p element produces one block with a contiguous index."""
        cues = "".join(
            f'<p begin="00:00:{i:02d}.000" end="00:00:{i:02d}.500">Line {i}</p>' for i in range(10)
        )
        blocks = _blocks(convert(f"<tt><body><div>{cues}</div></body></tt>"))

        assert len(blocks) == 10
        assert [block[0] for block in blocks] == [str(i) for i in range(1, 11)]
        assert [block[2] for block in blocks] == [f"Line {i}" for i in range(10)]

    def test_timestamps_use_comma_separator(self) -> None:
        """Test that the fraction separator becomes a comma in the same position."""
        result = convert('<tt><p begin="00:01:10.250" end="00:01:12.125">x</p></tt>')
        time_line = result.split("\n")[1]

        assert time_line == "00:01:10,250 --> 00:01:12,125"
        assert "." not in time_line

    def test_p_elements_outside_body_are_cues(self) -> None:
        """Test that any p element in the tree is treated as a cue."""
        document = """<tt>
            <head><p begin="00:00:00.000" end="00:00:01.000">Header</p></head>
            <body><div><div><p begin="00:00:02.000" end="00:00:03.000">Nested</p></div></div></body>
        </tt>"""
        blocks = _blocks(convert(document))

        assert [block[2] for block in blocks] == ["Header", "Nested"]


class TestDurationFallback:
    """Tests for computing end times from begin + dur."""

    def test_end_computed_from_duration(self) -> None:
        """Test that a missing end is derived from begin and dur."""
        result = convert('<tt><p begin="00:00:01.000" dur="00:00:02.500">Hello</p></tt>')
        assert result.split("\n")[1] == "00:00:01,000 --> 00:00:03,500"

    def test_duration_carries_into_minutes_and_hours(self) -> None:
        """Test that the computed end rolls over into minutes and hours."""
        result = convert('<tt><p begin="00:59:59.900" dur="00:00:00.200">Late</p></tt>')
        assert result.split("\n")[1] == "00:59:59,900 --> 01:00:00,100"

    def test_end_takes_precedence_over_duration(self) -> None:
        """Test that an explicit end wins over dur."""
        result = convert('<tt><p begin="00:00:01.000" end="00:00:02.000" dur="00:00:10.000">x</p></tt>')
        assert result.split("\n")[1] == "00:00:01,000 --> 00:00:02,000"

    def test_offset_time_duration(self) -> None:
        """Test dur given as an offset-time expression."""
        result = convert('<tt><p begin="2s" dur="1500ms">x</p></tt>')
        assert result.split("\n")[1] == "00:00:02,000 --> 00:00:03,500"


class TestTextExtraction:
    """Tests for cue text extraction."""

    def test_br_element_becomes_newline(self) -> None:
        """Test that a br element splits the cue text into two lines."""
        result = convert('<tt><p begin="00:00:01.000" end="00:00:02.000">Hello<br/>World</p></tt>')
        assert _blocks(result)[0][2:] == ["Hello", "World"]

    def test_namespaced_br_element(self) -> None:
        """Test that br in the TTML namespace is recognised."""
        document = '<tt xmlns="http://www.w3.org/ns/ttml"><body><p begin="1s" end="2s">A<br />B</p></body></tt>'
        assert _blocks(convert(document))[0][2:] == ["A", "B"]

    def test_empty_lines_are_dropped(self) -> None:
        """Test that consecutive br elements do not leave a blank line in the block."""
        result = convert('<tt><p begin="00:00:01.000" end="00:00:02.000">A<br/><br/>B</p></tt>')
        assert result == "1\n00:00:01,000 --> 00:00:02,000\nA\nB\n\n"

    def test_lines_are_stripped(self) -> None:
        """Test that whitespace around each line is removed."""
        root = parse_document("<p>  A  <br/>   B </p>")
        assert extract_text(root) == "A\nB"

    def test_escaped_br_markup_becomes_newline(self) -> None:
        """Test that literal br markup in the text is converted as well."""
        root = parse_document("<p>Hello&lt;BR /&gt;World&lt;br&gt;Again</p>")
        assert extract_text(root) == "Hello\nWorld\nAgain"

    def test_span_text_is_concatenated(self) -> None:
        """Test that text in nested spans is included in order."""
        root = parse_document("<p><span>Hello</span> <span>there <span>friend</span></span>!</p>")
        assert extract_text(root) == "Hello there friend!"

    def test_whitespace_is_trimmed(self) -> None:
        """Test that indentation around lines is removed."""
        root = parse_document("<p>\n      Hello<br/>\n      World\n    </p>")
        assert extract_text(root) == "Hello\nWorld"


class TestParseErrors:
    """Tests for document-level failures."""

    def test_missing_closing_tag_raises_parse_error(self) -> None:
        """Test that malformed XML raises ParseError."""
        with pytest.raises(ParseError, match="Invalid TTML file."):
            convert('<tt><body><p begin="00:00:01.000" end="00:00:02.000">Hi</body></tt>')

    def test_parse_error_chains_original_error(self) -> None:
        """Test that the underlying XML error is kept as the cause."""
        with pytest.raises(ParseError) as exc_info:
            convert("<tt>")
        assert exc_info.value.__cause__ is not None

    def test_non_xml_text_raises_parse_error(self) -> None:
        """Test that plain text is rejected."""
        with pytest.raises(ParseError):
            convert("1\n00:00:01,000 --> 00:00:02,000\nAlready SRT\n")

    def test_document_without_cues_returns_empty_string(self) -> None:
        """Test that a document with no p elements converts to an empty string."""
        assert convert('<tt xmlns="http://www.w3.org/ns/ttml"><body><div/></body></tt>') == ""


class TestCueErrors:
    """Tests for cues that cannot be emitted."""

    def test_cue_without_end_or_duration_is_skipped(self) -> None:
        """Test that an unresolvable end drops the cue and keeps indices contiguous."""
        document = """<tt>
            <p begin="00:00:01.000" end="00:00:02.000">One</p>
            <p begin="00:00:03.000">No end</p>
            <p begin="00:00:04.000" end="00:00:05.000">Three</p>
        </tt>"""
        result = TTMLConverter().convert_document(document)
        blocks = _blocks(result.srt_text)

        assert result.cue_count == 2
        assert [block[0] for block in blocks] == ["1", "2"]
        assert [block[2] for block in blocks] == ["One", "Three"]
        assert "undefined" not in result.srt_text
        assert len(result.cue_errors) == 1
        assert result.cue_errors[0].index == 2
        assert "unresolvable" in result.cue_errors[0].reason

    def test_cue_without_begin_is_skipped(self) -> None:
        """Test that a cue without begin is reported."""
        result = TTMLConverter().convert_document('<tt><p end="00:00:02.000">x</p></tt>')

        assert result.srt_text == ""
        assert result.cue_errors[0].reason == "missing 'begin' attribute"

    def test_unsupported_time_expression_is_skipped(self) -> None:
        """Test that an unparseable time expression is reported, not raised."""
        result = TTMLConverter().convert_document('<tt><p begin="soon" end="later">x</p></tt>')

        assert result.cue_count == 0
        assert isinstance(result.cue_errors[0], CueError)
        assert "Unsupported time expression" in result.cue_errors[0].reason

    def test_out_of_range_time_is_skipped(self) -> None:
        """Test that times beyond the timedelta range are reported, not raised."""
        document = """<tt>
            <p begin="99999999999999h" end="00:00:02.000">Huge begin</p>
            <p begin="23999999999:00:00" dur="23999999999:00:00">Huge sum</p>
            <p begin="00:00:01.000" end="00:00:02.000">Fine</p>
        </tt>"""
        result = TTMLConverter().convert_document(document)

        assert result.cue_count == 1
        assert _blocks(result.srt_text)[0][2] == "Fine"
        assert [error.index for error in result.cue_errors] == [1, 2]
        assert "out of range" in result.cue_errors[0].reason
        assert "out of range" in result.cue_errors[1].reason

    def test_end_before_begin_is_skipped(self) -> None:
        """Test that a negative duration is reported."""
        result = TTMLConverter().convert_document('<tt><p begin="00:00:05.000" end="00:00:04.000">x</p></tt>')

        assert result.cue_count == 0
        assert "precedes begin" in result.cue_errors[0].reason

    def test_empty_end_attribute_falls_back_to_duration(self) -> None:
        """Test that an empty end attribute is treated as absent."""
        result = convert('<tt><p begin="00:00:01.000" end="" dur="00:00:01.000">x</p></tt>')
        assert result.split("\n")[1] == "00:00:01,000 --> 00:00:02,000"

    def test_skipped_cue_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that skipped cues produce a warning."""
        with caplog.at_level(logging.WARNING, logger="ttml2srt.processing.ttml_converter"):
            convert('<tt><p begin="00:00:01.000">x</p></tt>')

        assert "Skipping Cue 1" in caplog.text


class TestDocumentTiming:
    """Tests for frame and tick based time expressions."""

    def test_frames_use_document_frame_rate(self) -> None:
        """Test that ttp:frameRate is applied to clock-time frames."""
        document = """<tt xmlns="http://www.w3.org/ns/ttml"
                xmlns:ttp="http://www.w3.org/ns/ttml#parameter" ttp:frameRate="25">
            <body><p begin="00:00:01:12" end="00:00:02:00">Framed</p></body>
        </tt>"""
        assert convert(document).split("\n")[1] == "00:00:01,480 --> 00:00:02,000"

    def test_ticks_use_document_tick_rate(self) -> None:
        """Test that ttp:tickRate is applied to tick offsets."""
        document = """<tt xmlns="http://www.w3.org/ns/ttml"
                xmlns:ttp="http://www.w3.org/ns/ttml#parameter" ttp:tickRate="10000000">
            <body><p begin="10000000t" end="25000000t">Ticks</p></body>
        </tt>"""
        assert convert(document).split("\n")[1] == "00:00:01,000 --> 00:00:02,500"
