"""Unit tests for ArchiveReader."""

import zipfile

import pytest

from listing_hub.io.readers import ArchiveReader, ArchiveReadError, read_archive_rows


@pytest.fixture
def archive(tmp_path):
    path = tmp_path / "data.zip"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("city.csv", "\ufeffid, city ,state_id\n007,Springfield,\n")
        zf.writestr("empty.csv", "")
    return path


@pytest.mark.unit
class TestArchiveReader:
    def test_reads_rows_as_strings(self, archive):
        rows = ArchiveReader(str(archive)).read_rows("city.csv")

        assert rows == [{"id": "007", "city": "Springfield", "state_id": None}]

    def test_missing_member(self, archive):
        with pytest.raises(ArchiveReadError) as exc_info:
            ArchiveReader(str(archive)).read_rows("state.csv")

        assert exc_info.value.member == "state.csv"
        assert "state.csv not found" in str(exc_info.value)

    def test_missing_archive(self, tmp_path):
        with pytest.raises(ArchiveReadError, match="Archive not found"):
            ArchiveReader(str(tmp_path / "nope.zip")).read_rows("city.csv")

    def test_corrupt_archive(self, tmp_path):
        path = tmp_path / "bad.zip"
        path.write_bytes(b"not a zip file")

        with pytest.raises(ArchiveReadError, match="corrupted"):
            ArchiveReader(str(path)).read_rows("city.csv")

    def test_empty_member_returns_no_rows(self, archive):
        assert ArchiveReader(str(archive)).read_rows("empty.csv") == []

    def test_list_members(self, archive):
        assert ArchiveReader(str(archive)).list_members() == ["city.csv", "empty.csv"]

    def test_convenience_function(self, archive):
        assert read_archive_rows(str(archive), "city.csv")[0]["city"] == "Springfield"


@pytest.fixture
def messy_archive(tmp_path):
    path = tmp_path / "messy.zip"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr(
            "beauty_salon.csv",
            "id,title,address\n"
            "s1,Good Salon,1 Oak Ave\n"
            "s2,Bad Salon,12 Elm St, Suite 4\n"
            "s3,Short Salon\n",
        )
        zf.writestr("city.csv", "id,city,state_id\nc1,Springfield,IL,\nc2,Peoria,IL,\n")
    return path


@pytest.mark.unit
class TestLenientParsing:
    def test_row_with_extra_field_is_kept(self, messy_archive):
        rows = ArchiveReader(str(messy_archive)).read_rows("beauty_salon.csv")

        assert [r["id"] for r in rows] == ["s1", "s2", "s3"]
        assert rows[1] == {"id": "s2", "title": "Bad Salon", "address": "12 Elm St"}

    def test_short_row_is_padded_with_none(self, messy_archive):
        rows = ArchiveReader(str(messy_archive)).read_rows("beauty_salon.csv")

        assert rows[2] == {"id": "s3", "title": "Short Salon", "address": None}

    def test_trailing_delimiter_does_not_shift_columns(self, messy_archive):
        rows = ArchiveReader(str(messy_archive)).read_rows("city.csv")

        assert rows == [
            {"id": "c1", "city": "Springfield", "state_id": "IL"},
            {"id": "c2", "city": "Peoria", "state_id": "IL"},
        ]
