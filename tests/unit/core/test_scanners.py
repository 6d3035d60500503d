"""Unit tests for the post-walk scanners."""

from datetime import UTC, datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from dir_analyzer.core.scanners import (
    detect_empty_files,
    detect_large_files,
    filter_by_date,
    filter_by_size,
    top_largest_files,
)
from dir_analyzer.types.models import FileRecord
from tests.fixtures.fake_filesystem import FakeFileSystem

RECORDS = [
    FileRecord("/data/a", 10),
    FileRecord("/data/b", 2048),
    FileRecord("/data/c", 0),
    FileRecord("/data/d", 500),
]


class TestDetectLargeFiles:
    def test_threshold_inclusive_and_sorted(self) -> None:
        large = detect_large_files(RECORDS, 500)

        assert [(f.path, f.size) for f in large] == [("/data/b", 2048), ("/data/d", 500)]
        assert large[0].size_formatted == "2.0 KB"

    def test_nothing_large(self) -> None:
        assert detect_large_files(RECORDS, 10_000) == []


class TestTopLargestFiles:
    def test_top_two(self) -> None:
        assert [f.path for f in top_largest_files(RECORDS, 2)] == ["/data/b", "/data/d"]

    def test_count_larger_than_input(self) -> None:
        assert len(top_largest_files(RECORDS, 100)) == len(RECORDS)

    def test_non_positive_count(self) -> None:
        assert top_largest_files(RECORDS, 0) == []

    def test_input_not_mutated(self) -> None:
        records = list(RECORDS)
        _ = top_largest_files(records, 2)

        assert records == RECORDS

    @given(
        st.lists(st.integers(min_value=0, max_value=10**9), max_size=30),
        st.integers(min_value=1, max_value=40),
    )
    def test_length_and_order(self, sizes: list[int], count: int) -> None:
        """Property: min(N, len) results in non-increasing size order."""
        records = [FileRecord(f"/f{index}", size) for index, size in enumerate(sizes)]

        top = top_largest_files(records, count)

        assert len(top) == min(count, len(records))
        assert all(first.size >= second.size for first, second in zip(top, top[1:], strict=False))


class TestFilterBySize:
    @pytest.mark.parametrize(
        ("min_size", "max_size", "expected"),
        [
            (None, None, ["/data/a", "/data/b", "/data/c", "/data/d"]),
            (10, None, ["/data/a", "/data/b", "/data/d"]),
            (None, 500, ["/data/a", "/data/c", "/data/d"]),
            (10, 500, ["/data/a", "/data/d"]),
            (600, 700, []),
        ],
    )
    def test_inclusive_bounds(self, min_size: int | None, max_size: int | None, expected: list[str]) -> None:
        assert [f.path for f in filter_by_size(RECORDS, min_size, max_size)] == expected


class TestFilterByDate:
    @pytest.mark.asyncio
    async def test_range(self, fake_fs: FakeFileSystem) -> None:
        old = FileRecord(fake_fs.add_file("/data/old", b"1", mtime=datetime(2022, 5, 1).timestamp()), 1)
        mid = FileRecord(fake_fs.add_file("/data/mid", b"1", mtime=datetime(2023, 5, 1).timestamp()), 1)
        new = FileRecord(fake_fs.add_file("/data/new", b"1", mtime=datetime(2024, 5, 1).timestamp()), 1)

        result = await filter_by_date([old, mid, new], fake_fs, datetime(2023, 1, 1), datetime(2023, 12, 31))

        assert result == [mid]

    @pytest.mark.asyncio
    async def test_bounds_inclusive(self, fake_fs: FakeFileSystem) -> None:
        moment = datetime(2023, 5, 1, 8, 30)
        record = FileRecord(fake_fs.add_file("/data/x", b"1", mtime=moment.timestamp()), 1)

        assert await filter_by_date([record], fake_fs, moment, moment) == [record]

    @pytest.mark.asyncio
    async def test_timezone_aware_bounds(self, fake_fs: FakeFileSystem) -> None:
        def utc_file(name: str, hour: int) -> FileRecord:
            mtime = datetime(2023, 5, 1, hour, tzinfo=UTC).timestamp()
            return FileRecord(fake_fs.add_file(f"/data/{name}", b"1", mtime=mtime), 1)

        before = utc_file("before", 9)
        inside = utc_file("inside", 12)
        after = utc_file("after", 15)

        result = await filter_by_date(
            [before, inside, after],
            fake_fs,
            datetime(2023, 5, 1, 11, tzinfo=UTC),
            datetime(2023, 5, 1, 13, tzinfo=UTC),
        )

        assert result == [inside]

    @pytest.mark.asyncio
    async def test_vanished_file_dropped(self, fake_fs: FakeFileSystem) -> None:
        record = FileRecord(fake_fs.add_file("/data/x", b"1"), 1)
        fake_fs.remove("/data/x")

        assert await filter_by_date([record], fake_fs, datetime(2000, 1, 1), None) == []

    @pytest.mark.asyncio
    async def test_no_bounds_returns_everything_without_stat(self, fake_fs: FakeFileSystem) -> None:
        assert await filter_by_date(RECORDS, fake_fs) == RECORDS
        assert fake_fs.stat_calls == []


class TestDetectEmptyFiles:
    @pytest.mark.asyncio
    async def test_sorted_newest_first(self, fake_fs: FakeFileSystem) -> None:
        first = fake_fs.add_file("/data/e1", mtime=datetime(2023, 1, 1).timestamp())
        second = fake_fs.add_file("/data/e2", mtime=datetime(2024, 1, 1).timestamp())
        full = fake_fs.add_file("/data/full", b"data")
        records = [FileRecord(first, 0), FileRecord(second, 0), FileRecord(full, 4)]

        empty = await detect_empty_files(records, fake_fs)

        assert [e.path for e in empty] == [second, first]
        assert empty[0].modified == datetime(2024, 1, 1)

    @pytest.mark.asyncio
    async def test_unstattable_empty_file_dropped(self, fake_fs: FakeFileSystem) -> None:
        path = fake_fs.add_file("/data/e")
        fake_fs.stat_errors.add(path)

        assert await detect_empty_files([FileRecord(path, 0)], fake_fs) == []
