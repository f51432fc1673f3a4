import pytest

from filestreambot.hashing import check_hash, get_short_hash, pack_file
from filestreambot.types import HashableFile


def test_pack_file_matches_hashable_file():
    assert pack_file("doc.pdf", 2048, "application/pdf", 7) == HashableFile(
        "doc.pdf", 2048, "application/pdf", 7
    ).pack()


def test_get_short_hash_is_prefix():
    full = pack_file("doc.pdf", 2048, "application/pdf", 7)
    short = get_short_hash(full, 6)
    assert len(short) == 6
    assert full.startswith(short)


def test_get_short_hash_full_length():
    full = pack_file("doc.pdf", 2048, "application/pdf", 7)
    assert get_short_hash(full, 32) == full


@pytest.mark.parametrize("length", [33, -1])
def test_get_short_hash_out_of_range(length):
    full = pack_file("doc.pdf", 2048, "application/pdf", 7)
    with pytest.raises(ValueError):
        get_short_hash(full, length)


def test_check_hash_accepts_matching_prefix():
    full = pack_file("clip.mkv", 99, "video/x-matroska", 1)
    assert check_hash(full[:8], full, 8) is True


def test_check_hash_rejects_wrong_length_or_value():
    full = pack_file("clip.mkv", 99, "video/x-matroska", 1)
    assert check_hash(full[:7], full, 8) is False
    other = pack_file("clip.mkv", 100, "video/x-matroska", 1)
    assert check_hash(other[:8], full, 8) is (other[:8] == full[:8])