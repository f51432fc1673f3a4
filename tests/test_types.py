import string

from filestreambot.types import File, HashableFile, RootResponse


def test_pack_is_hex_md5():
    digest = HashableFile("video.mp4", 1024, "video/mp4", 42).pack()
    assert len(digest) == 32
    assert set(digest) <= set(string.hexdigits.lower())


def test_pack_is_deterministic():
    first = HashableFile("video.mp4", 1024, "video/mp4", 42).pack()
    second = HashableFile("video.mp4", 1024, "video/mp4", 42).pack()
    assert first == second


def test_pack_depends_on_every_field():
    base = HashableFile("video.mp4", 1024, "video/mp4", 42)
    variants = [
        HashableFile("other.mp4", 1024, "video/mp4", 42),
        HashableFile("video.mp4", 1025, "video/mp4", 42),
        HashableFile("video.mp4", 1024, "audio/mp4", 42),
        HashableFile("video.mp4", 1024, "video/mp4", 43),
    ]
    digests = {v.pack() for v in variants}
    assert base.pack() not in digests
    assert len(digests) == 4


def test_pack_concatenates_fields_without_separator():
    # "a1" + "0" and "a" + "10" give the same bytes.
    assert HashableFile("a1", 0, "", 0).pack() == HashableFile("a", 10, "", 0).pack()


def test_file_holds_fields():
    file = File(location=None, file_size=10, file_name="a.txt", mime_type="text/plain", id=5)
    assert (file.file_size, file.file_name, file.mime_type, file.id) == (10, "a.txt", "text/plain", 5)


def test_root_response_to_dict():
    response = RootResponse(message="Server is running.", ok=True, uptime="1 second", version="3.0.0")
    assert response.to_dict() == {
        "message": "Server is running.",
        "ok": True,
        "uptime": "1 second",
        "version": "3.0.0",
    }