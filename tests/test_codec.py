"""
Unit tests for the persistence codec.
"""

import os
import stat
import sys
import zlib
import pytest
import msgpack

from imagedupe.exceptions import DecodeError, EncodeError, FilesystemError
from imagedupe.hashdb import HashDB, codec
from imagedupe.models import Fingerprint
from conftest import fingerprint_with_bits


@pytest.fixture
def populated_db():
    return HashDB({
        "/photos/a.png": fingerprint_with_bits(0, 1, 2),
        "/photos/b.jpg": fingerprint_with_bits(63),
        "/photos/ünïcode.webp": Fingerprint(bytes.fromhex("deadbeefcafef00d")),
    })


def _pack(payload) -> bytes:
    return zlib.compress(msgpack.packb(payload, use_bin_type=True))


class TestRoundTrip:
    """Test encode/decode and save/load round trips."""

    def test_bytes_round_trip(self, populated_db):
        assert HashDB.from_bytes(populated_db.to_bytes()) == populated_db

    def test_empty_round_trip(self):
        assert HashDB.from_bytes(HashDB().to_bytes()) == HashDB()

    def test_file_round_trip(self, populated_db, temp_dir):
        db_file = temp_dir / ".image_hash.db"
        populated_db.to_file(db_file)

        loaded = HashDB.from_file(db_file)
        assert loaded == populated_db
        assert loaded["/photos/b.jpg"].data == populated_db["/photos/b.jpg"].data

    def test_synced_round_trip(self, image_dir, temp_dir):
        db = HashDB()
        db.sync(image_dir)
        db.to_file(temp_dir / "db")
        assert HashDB.from_file(temp_dir / "db") == db

    def test_overwrite_existing(self, populated_db, temp_dir):
        db_file = temp_dir / "db"
        HashDB().to_file(db_file)
        populated_db.to_file(db_file)
        assert HashDB.from_file(db_file) == populated_db

    def test_undecodable_filename_round_trip(self, temp_dir):
        # How Python spells the filename bytes b"caf\xe9.png"
        name = "/photos/caf\udce9.png"
        db = HashDB({name: fingerprint_with_bits(4)})
        db.to_file(temp_dir / "db")

        loaded = HashDB.from_file(temp_dir / "db")
        assert loaded == db
        assert list(loaded) == [name]

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem accepting non-UTF-8 names")
    def test_synced_undecodable_filename(self, image_dir, temp_dir):
        raw_name = os.path.join(os.fsencode(image_dir), b"caf\xe9.png")
        with open(raw_name, "wb") as f:
            f.write((image_dir / "a.png").read_bytes())

        db = HashDB()
        report = db.sync(image_dir)
        assert os.fsdecode(raw_name) in report.added

        db.to_file(temp_dir / "db")
        loaded = HashDB.from_file(temp_dir / "db")
        assert loaded == db
        assert not loaded.sync(image_dir).changed


class TestFormat:
    """Test the on-disk layout."""

    def test_zlib_wrapped_msgpack_map(self, populated_db):
        payload = msgpack.unpackb(zlib.decompress(populated_db.to_bytes()), raw=False)
        assert payload["/photos/a.png"] == populated_db["/photos/a.png"].data

    def test_fingerprints_stored_as_bin(self, populated_db):
        packed = zlib.decompress(populated_db.to_bytes())
        # bin 8 marker followed by a one-byte length of 8
        assert b"\xc4\x08" + bytes.fromhex("deadbeefcafef00d") in packed

    def test_reads_externally_written_file(self, temp_dir):
        blob = _pack({"/x.png": b"\x00" * 8})
        assert codec.decode(blob) == {"/x.png": Fingerprint(b"\x00" * 8)}


class TestDecodeErrors:
    """Test rejection of malformed data."""

    def test_bad_compressed_stream(self):
        with pytest.raises(DecodeError):
            codec.decode(b"definitely not zlib")

    def test_truncated_stream(self, populated_db):
        blob = populated_db.to_bytes()
        with pytest.raises(DecodeError):
            codec.decode(blob[:len(blob) // 2])

    def test_malformed_msgpack(self):
        with pytest.raises(DecodeError):
            codec.decode(zlib.compress(b"\xc1"))

    def test_empty_payload(self):
        with pytest.raises(DecodeError):
            codec.decode(zlib.compress(b""))

    def test_trailing_data(self):
        with pytest.raises(DecodeError):
            codec.decode(zlib.compress(msgpack.packb({}) + b"\x00"))

    def test_not_a_map(self):
        with pytest.raises(DecodeError):
            codec.decode(_pack([1, 2, 3]))

    def test_wrong_fingerprint_length(self):
        with pytest.raises(DecodeError) as excinfo:
            codec.decode(_pack({"/x.png": b"\x00" * 7}))
        assert "/x.png" in str(excinfo.value)

    def test_fingerprint_as_int_array(self):
        with pytest.raises(DecodeError):
            codec.decode(_pack({"/x.png": [0] * 8}))

    def test_fingerprint_as_str(self):
        with pytest.raises(DecodeError):
            codec.decode(_pack({"/x.png": "abcdefgh"}))

    def test_binary_key(self):
        with pytest.raises(DecodeError):
            codec.decode(_pack({b"/x.png": b"\x00" * 8}))

    def test_integer_key(self):
        with pytest.raises(DecodeError):
            codec.decode(_pack({1: b"\x00" * 8}))

    def test_no_partial_load(self):
        blob = _pack({"/ok.png": b"\x00" * 8, "/bad.png": b"\x00"})
        with pytest.raises(DecodeError):
            HashDB.from_bytes(blob)


class TestEncodeErrors:
    """Test rejection of unrepresentable data."""

    def test_unpaired_surrogate_path(self):
        # Only U+DC80..U+DCFF stand for raw filename bytes
        db = HashDB({"/photos/\ud800.png": fingerprint_with_bits(1)})
        with pytest.raises(EncodeError):
            db.to_bytes()

    def test_non_string_path(self):
        with pytest.raises(EncodeError):
            codec.encode({1: fingerprint_with_bits(1)})

    def test_non_fingerprint_value(self):
        with pytest.raises(EncodeError):
            codec.encode({"/x.png": b"\x00" * 8})


class TestFileErrors:
    """Test filesystem failures."""

    def test_load_missing_file(self, temp_dir):
        with pytest.raises(FilesystemError):
            HashDB.from_file(temp_dir / "missing.db")

    def test_save_into_missing_directory(self, populated_db, temp_dir):
        with pytest.raises(FilesystemError):
            populated_db.to_file(temp_dir / "missing" / "db")

    def test_save_leaves_no_temp_files(self, populated_db, temp_dir):
        populated_db.to_file(temp_dir / "db")
        assert os.listdir(temp_dir) == ["db"]

    def test_failed_encode_keeps_old_file(self, populated_db, temp_dir):
        db_file = temp_dir / "db"
        populated_db.to_file(db_file)

        with pytest.raises(EncodeError):
            HashDB({"/\ud800.png": fingerprint_with_bits(1)}).to_file(db_file)

        assert HashDB.from_file(db_file) == populated_db


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
class TestFilePermissions:
    """Test the mode of written database files."""

    def test_new_file_follows_umask(self, populated_db, temp_dir):
        umask = os.umask(0o022)
        try:
            populated_db.to_file(temp_dir / "db")
        finally:
            os.umask(umask)
        assert stat.S_IMODE(os.stat(temp_dir / "db").st_mode) == 0o644

    def test_existing_mode_kept(self, populated_db, temp_dir):
        db_file = temp_dir / "db"
        HashDB().to_file(db_file)
        os.chmod(db_file, 0o640)

        populated_db.to_file(db_file)
        assert stat.S_IMODE(os.stat(db_file).st_mode) == 0o640
