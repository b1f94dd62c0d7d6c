"""
Unit tests for slide JSON parsing.

Covers fenced and bare JSON, prose around the object, invalid backslash
escapes, camelCase keys and list-valued content.
"""

import pytest

from corporate_advisor.ai.slides import (
    SlideParseError,
    extract_json_text,
    fix_invalid_escapes,
    parse_slides,
    slides_to_dicts,
)


class TestExtractJsonText:
    def test_fenced_block(self):
        text = 'Here you go:\n```json\n{"slides": []}\n```\nThanks'
        assert extract_json_text(text) == '{"slides": []}'

    def test_outermost_object_in_prose(self):
        text = 'Result: {"slides": [{"title": "A"}]} end'
        assert extract_json_text(text) == '{"slides": [{"title": "A"}]}'

    def test_plain_text_is_stripped(self):
        assert extract_json_text("  nothing  ") == "nothing"


class TestFixInvalidEscapes:
    def test_invalid_escape_is_doubled(self):
        assert fix_invalid_escapes(r'"\(x\)"') == r'"\\(x\\)"'

    def test_valid_escapes_untouched(self):
        assert fix_invalid_escapes(r'"a\nb\"c"') == r'"a\nb\"c"'


class TestParseSlides:
    def test_parses_fenced_slides(self):
        text = '```json\n{"slides": [{"slide_number": 1, "title": "개요", "content": "내용"}]}\n```'
        slides = parse_slides(text)
        assert len(slides) == 1
        assert slides[0].slide_number == 1
        assert slides[0].title == "개요"
        assert slides[0].content == "내용"
        assert slides[0].chart_type == "none"

    def test_camel_case_keys_and_list_content(self):
        text = '{"slides": [{"slideNumber": "2", "title": "T", "content": ["a", "- b"], "speakerNotes": "n"}]}'
        slide = parse_slides(text)[0]
        assert slide.slide_number == 2
        assert slide.content == "- a\n- b"
        assert slide.speaker_notes == "n"

    def test_missing_number_uses_position(self):
        slides = parse_slides('{"slides": [{"title": "A"}, {"title": "B", "slide_number": "x"}]}')
        assert [s.slide_number for s in slides] == [1, 2]

    def test_top_level_list(self):
        slides = parse_slides('[{"title": "A"}]')
        assert slides[0].title == "A"

    def test_repairs_invalid_escapes(self):
        slides = parse_slides(r'{"slides": [{"title": "수식 \(a+b\)"}]}')
        assert slides[0].title == r"수식 \(a+b\)"

    def test_chart_type_is_always_none(self):
        slides = parse_slides('{"slides": [{"title": "A", "chart_type": "bar"}]}')
        assert slides[0].chart_type == "none"

    @pytest.mark.parametrize("text", ["", "   ", '{"slides": []}', '{"other": 1}', "not json at all"])
    def test_unusable_output_raises(self, text):
        with pytest.raises(SlideParseError):
            parse_slides(text)

    def test_non_dict_entries_only_raises(self):
        with pytest.raises(SlideParseError):
            parse_slides('{"slides": [1, 2]}')

    def test_slides_to_dicts(self):
        slides = parse_slides('{"slides": [{"title": "A"}]}')
        assert slides_to_dicts(slides) == [
            {"slide_number": 1, "title": "A", "content": "", "speaker_notes": "", "chart_type": "none"}
        ]
