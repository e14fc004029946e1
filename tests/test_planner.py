"""Tests for bitrate and chunk planning."""

import pytest

from domain.planner import (
    MAX_SINGLE_CHUNK_SECONDS,
    MIN_BITRATE_KBPS,
    SAFE_MAX_BYTES,
    calculate_chunk_boundaries,
    calculate_target_bitrate,
    is_audio_oversized,
    needs_chunking,
)


class TestIsAudioOversized:
    def test_small_file(self):
        assert not is_audio_oversized(1_000_000)

    def test_at_safe_boundary(self):
        assert not is_audio_oversized(24_000_000)

    def test_over_safe_limit(self):
        assert is_audio_oversized(24_000_001)


class TestCalculateTargetBitrate:
    def test_thirty_minutes(self):
        # 24MB * 8 / 1800s / 1000 = 106.67
        assert calculate_target_bitrate(1800) == 106

    def test_fifty_minutes(self):
        assert calculate_target_bitrate(3000, SAFE_MAX_BYTES) == 64

    def test_never_below_minimum(self):
        assert calculate_target_bitrate(100_000) == MIN_BITRATE_KBPS

    @pytest.mark.parametrize("duration", [0.5, 60, 6000, 6001, 50_000, 10_000_000])
    def test_minimum_holds_for_any_duration(self, duration):
        assert calculate_target_bitrate(duration) >= 32

    def test_short_audio_gets_high_bitrate(self):
        assert calculate_target_bitrate(60) == 3200


class TestNeedsChunking:
    def test_threshold_derived_from_budget(self):
        assert MAX_SINGLE_CHUNK_SECONDS == 6000

    def test_one_hour(self):
        assert not needs_chunking(3600)

    def test_at_boundary(self):
        assert not needs_chunking(6000)

    def test_over_boundary(self):
        assert needs_chunking(6001)


class TestCalculateChunkBoundaries:
    @pytest.mark.parametrize("duration", [1, 600, 2700, 5999.5, 6000])
    def test_single_chunk_up_to_threshold(self, duration):
        chunks = calculate_chunk_boundaries(duration)
        assert len(chunks) == 1
        assert chunks[0].index == 0
        assert chunks[0].start_seconds == 0
        assert chunks[0].duration_seconds == duration

    def test_two_hours(self):
        chunks = calculate_chunk_boundaries(7200)
        assert [c.start_seconds for c in chunks] == [0, 1485, 2970, 4455, 5940]
        assert [c.duration_seconds for c in chunks] == [1500, 1500, 1500, 1500, 1260]
        assert chunks[-1].end_seconds >= 7200

    @pytest.mark.parametrize("duration", [6001, 7200, 7424, 9000.7, 36_000])
    def test_overlap_and_coverage(self, duration):
        chunks = calculate_chunk_boundaries(duration)
        assert len(chunks) > 1
        for prev, nxt in zip(chunks, chunks[1:]):
            assert nxt.start_seconds < prev.start_seconds + prev.duration_seconds
        assert chunks[-1].end_seconds >= duration
        assert all(c.end_seconds <= duration for c in chunks)

    @pytest.mark.parametrize("duration", [7425.05, 7430, 7440])
    def test_no_window_inside_the_previous_one(self, duration):
        # The window at 5940s already reaches the end; nothing starts at 7425s.
        chunks = calculate_chunk_boundaries(duration)
        assert [c.start_seconds for c in chunks] == [0, 1485, 2970, 4455, 5940]
        assert chunks[-1].end_seconds == pytest.approx(duration)

    def test_every_window_extends_coverage(self):
        chunks = calculate_chunk_boundaries(7425.05)
        for prev, nxt in zip(chunks, chunks[1:]):
            assert nxt.end_seconds > prev.end_seconds
        assert min(calculate_target_bitrate(c.duration_seconds) for c in chunks) >= 32
        assert max(calculate_target_bitrate(c.duration_seconds) for c in chunks) < 200

    def test_tail_past_last_window_gets_own_chunk(self):
        chunks = calculate_chunk_boundaries(7441)
        assert [c.start_seconds for c in chunks] == [0, 1485, 2970, 4455, 5940, 7425]
        assert chunks[-1].duration_seconds == pytest.approx(16)

    def test_sequential_indices(self):
        chunks = calculate_chunk_boundaries(20_000)
        assert [c.index for c in chunks] == list(range(len(chunks)))

    def test_custom_window(self):
        chunks = calculate_chunk_boundaries(7000, chunk_duration=3000, overlap=100)
        assert [c.start_seconds for c in chunks] == [0, 2900, 5800]
        assert chunks[-1].duration_seconds == 1200

    def test_overlap_must_be_shorter_than_window(self):
        with pytest.raises(ValueError):
            calculate_chunk_boundaries(7000, chunk_duration=100, overlap=100)
