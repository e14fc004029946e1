from domain.models import AudioAsset, ChunkBoundary, DiarizedSegment


class TestDomainModels:
    def test_segment_shift_returns_new_segment(self):
        seg = DiarizedSegment(start=1.0, end=2.5, text="hi", speaker="A")
        moved = seg.shifted(1485)
        assert (moved.start, moved.end) == (1486.0, 1487.5)
        assert seg.start == 1.0

    def test_chunk_end(self):
        assert ChunkBoundary(index=4, start_seconds=5940, duration_seconds=1260).end_seconds == 7200

    def test_asset_size(self):
        assert AudioAsset(path="/tmp/a.wav", filename="a.wav", data=b"1234").size == 4

