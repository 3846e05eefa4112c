import pytest

from media_probe.models import MediaType
from media_probe.utils import is_absolute_http_url, normalize_url, url_extension_type


class TestNormalizeUrl:
    def test_strips_byte_range_parameters(self):
        first = "https://video.example.com/v.mp4?id=7&bytestart=0&byteend=1023"
        second = "https://video.example.com/v.mp4?id=7&bytestart=1024&byteend=2047"

        assert normalize_url(first) == "https://video.example.com/v.mp4?id=7"
        assert normalize_url(first) == normalize_url(second)

    def test_is_idempotent(self):
        url = "https://cdn.example.com/a.mp4?bytestart=5&x=1&byteend=9&range=0-99#t=3"
        once = normalize_url(url)

        assert normalize_url(once) == once
        assert once == "https://cdn.example.com/a.mp4?x=1#t=3"

    def test_drops_question_mark_when_only_ranges(self):
        url = "https://cdn.example.com/a.mp4?bytestart=0&byteend=10"

        assert normalize_url(url) == "https://cdn.example.com/a.mp4"

    def test_leaves_other_parameters_untouched(self):
        url = "https://cdn.example.com/a.mp4?sig=a%2Cb&mime=video%2Fmp4"

        assert normalize_url(url) == url

    def test_without_query(self):
        assert normalize_url("https://example.com/a.png") == "https://example.com/a.png"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://e.com/clip.mp4", MediaType.VIDEO),
        ("https://e.com/live/index.M3U8?token=1", MediaType.VIDEO),
        ("https://e.com/song.mp3?download=1", MediaType.AUDIO),
        ("https://e.com/track.flac", MediaType.AUDIO),
        ("https://e.com/pic.JPEG", MediaType.IMAGE),
        ("https://e.com/page.html", None),
        ("https://e.com/file?name=clip.mp4", None),
    ],
)
def test_url_extension_type(url, expected):
    assert url_extension_type(url) == expected


def test_is_absolute_http_url():
    assert is_absolute_http_url("https://example.com/watch?v=1")
    assert is_absolute_http_url("http://example.com")
    assert not is_absolute_http_url("/relative/path")
    assert not is_absolute_http_url("ftp://example.com/file")
    assert not is_absolute_http_url("example.com")
