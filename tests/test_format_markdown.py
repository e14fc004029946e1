"""Tests for markdown formatting, prompt building and oversized-input splitting."""

import threading
import time

import pytest

from use_cases.format_markdown import (
    FormatContext,
    MarkdownFormatter,
    build_prompt,
    max_input_chars,
    split_text,
)
from conftest import FakeTextGenerator

CONTEXT = FormatContext(content_type="video/audio transcription", title="standup.mp3", source="standup.mp3")


class TestMaxInputChars:
    def test_default_budget(self):
        assert max_input_chars() == (8192 - 1024) * 4

    def test_never_zero(self):
        assert max_input_chars(max_output_tokens=100) == 1


class TestSplitText:
    def test_short_text_is_one_part(self):
        assert split_text("hello", 100) == ["hello"]

    def test_prefers_heading(self):
        text = "# One\n" + "a" * 60 + "\n\n" + "b" * 10 + "\n## Two\n" + "c" * 30
        parts = split_text(text, 100)
        assert parts[0].endswith("b" * 10)
        assert parts[1].startswith("## Two")

    def test_falls_back_to_paragraph(self):
        text = "a" * 70 + "\n\n" + "b" * 70
        assert split_text(text, 100) == ["a" * 70, "b" * 70]

    def test_falls_back_to_newline(self):
        text = "a" * 70 + "\n" + "b" * 70
        assert split_text(text, 100) == ["a" * 70, "b" * 70]

    def test_ignores_boundary_in_first_half(self):
        text = "a" * 10 + "\n\n" + "b" * 150
        parts = split_text(text, 100)
        assert len(parts[0]) == 100
        assert "".join(parts).replace("\n", "") == text.replace("\n", "")

    def test_hard_cut_without_boundaries(self):
        parts = split_text("x" * 250, 100)
        assert [len(p) for p in parts] == [100, 100, 50]

    def test_parts_fit_budget(self):
        text = "\n\n".join(f"Paragraph {i} " + "word " * 30 for i in range(40))
        parts = split_text(text, 500)
        assert all(len(p) <= 500 for p in parts)
        assert " ".join(parts).split() == text.split()


class TestBuildPrompt:
    def test_single_part(self):
        prompt = build_prompt("raw words", CONTEXT)
        assert prompt.startswith("Convert this video/audio transcription content into clean markdown:")
        assert "Title: standup.mp3" in prompt
        assert "Part " not in prompt
        assert prompt.endswith("---\n\nraw words")

    def test_part_label(self):
        prompt = build_prompt("raw", CONTEXT, part=2, total_parts=3)
        assert "Part 2 of 3." in prompt

    def test_unknown_title(self):
        prompt = build_prompt("raw", FormatContext(content_type="audio"))
        assert "Title: Unknown" in prompt


class TestMarkdownFormatter:
    def test_single_request_when_it_fits(self):
        generator = FakeTextGenerator()
        formatter = MarkdownFormatter(generator, max_chars=1000)
        assert formatter.format("short transcript", CONTEXT) == "short transcript"
        assert len(generator.prompts) == 1

    def test_split_parts_keep_order(self):
        # Earlier parts finish last; output must still follow input order.
        def slow_first(prompt):
            body = prompt.split("---\n\n", 1)[-1]
            if body.startswith("a"):
                time.sleep(0.05)
            return body.upper()

        generator = FakeTextGenerator(transform=slow_first)
        formatter = MarkdownFormatter(generator, max_chars=100)
        text = "a" * 80 + "\n\n" + "b" * 80 + "\n\n" + "c" * 80

        result = formatter.format(text, CONTEXT)

        assert result == "A" * 80 + "\n\n" + "B" * 80 + "\n\n" + "C" * 80
        assert len(generator.prompts) == 3
        assert all("of 3." in p for p in generator.prompts)

    def test_parts_run_concurrently(self):
        barrier = threading.Barrier(2, timeout=5)

        def wait_for_peer(prompt):
            barrier.wait()
            return "ok"

        formatter = MarkdownFormatter(FakeTextGenerator(transform=wait_for_peer), max_chars=100)
        assert formatter.format("a" * 80 + "\n\n" + "b" * 80, CONTEXT) == "ok\n\nok"

    def test_generator_error_propagates(self):
        def fail(prompt):
            raise RuntimeError("boom")

        formatter = MarkdownFormatter(FakeTextGenerator(transform=fail), max_chars=100)
        with pytest.raises(RuntimeError, match="boom"):
            formatter.format("a" * 80 + "\n\n" + "b" * 80, CONTEXT)
