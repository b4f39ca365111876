"""Tests for markup stripping."""

import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from stages.markup import strip_markup, strip_tags
from stages.subtitles import parse_srt

TAGGED_SRT = """1
00:00:01,000 --> 00:00:03,000
<font face="sans-serif" size="71">Hello</font> <b>world</b>

2
00:00:03,000 --> 00:00:05,000
<i>Second line</i><br/>
and more
"""


class TestStripTags:
    def test_simple(self):
        assert strip_tags("<b>Hello</b>") == "Hello"

    def test_attributes(self):
        assert strip_tags('<font face="Arial" size="12">Text</font>') == "Text"

    def test_nested_and_self_closing(self):
        assert strip_tags("<i><b>Hi</b></i><br/>") == "Hi"

    def test_no_tags(self):
        assert strip_tags("Just text.") == "Just text."


class TestStripMarkup:
    def test_strips_text_lines(self):
        records = parse_srt(strip_markup(TAGGED_SRT))
        assert records[0].text == "Hello world"
        assert records[1].text == "Second line\nand more"

    def test_keeps_index_and_timing_lines(self):
        cleaned = strip_markup(TAGGED_SRT)
        assert "00:00:01,000 --> 00:00:03,000" in cleaned
        assert cleaned.splitlines()[0] == "1"

    def test_idempotent(self):
        for content in (TAGGED_SRT, "<<b>>odd<", "plain", "", "a<b<c>d>e\n\n\n1\n00:00:00,000 --> 00:00:01,000\n<i>x"):
            once = strip_markup(content)
            assert strip_markup(once) == once
