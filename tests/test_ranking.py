from media_probe.assembler import assemble_result
from media_probe.classifier import classify_dom_element, classify_response
from media_probe.models import CandidateResource, CandidateSource, MediaType
from media_probe.ranking import deduplicate, is_priority, rank
from media_probe.utils import normalize_url


def _network(url, content_type=None):
    return classify_response(url, content_type)


class TestDeduplicate:
    def test_first_seen_wins(self):
        candidates = [
            _network("https://cdn.example.com/a.png", "image/png"),
            classify_dom_element("img", "https://cdn.example.com/a.png"),
        ]

        resources = deduplicate(candidates)

        assert len(resources) == 1
        assert resources[0].source == CandidateSource.NETWORK_RESPONSE
        assert resources[0].content_type == "image/png"

    def test_byte_ranges_collapse(self):
        base = "https://media.example.com/videoplayback?id=1"
        candidates = [
            _network(base + "&bytestart=0&byteend=1023", "video/mp4"),
            _network(base + "&bytestart=1024&byteend=2047", "video/mp4"),
        ]

        resources = deduplicate(candidates)

        assert [r.url for r in resources] == [base]

    def test_unknown_type_is_inferred_from_extension(self):
        candidate = CandidateResource(
            url="https://e.com/a.ogg?bytestart=0&byteend=1",
            declared_type=MediaType.UNKNOWN,
            content_type=None,
            source=CandidateSource.DOM_SCAN,
        )

        assert deduplicate([candidate])[0].type == MediaType.AUDIO


class TestRank:
    def test_priority_first_then_first_seen(self):
        candidates = [
            _network("https://cdn.example.com/1.png", "image/png"),
            _network("https://rr3---sn.googlevideo.com/videoplayback?id=1", "video/mp4"),
            _network("https://cdn.example.com/2.mp3", "audio/mpeg"),
            _network("https://scontent.FBCDN.net/v/clip.mp4", "video/mp4"),
            _network("https://cdn.example.com/1.png", "image/png"),
        ]

        urls = [r.url for r in rank(candidates)]

        assert urls == [
            "https://rr3---sn.googlevideo.com/videoplayback?id=1",
            "https://scontent.FBCDN.net/v/clip.mp4",
            "https://cdn.example.com/1.png",
            "https://cdn.example.com/2.mp3",
        ]

    def test_output_keys_unique_and_partitioned(self):
        domains = ("media.example.org",)
        candidates = [
            _network(f"https://{host}/f{i % 3}.mp4?bytestart={i}&byteend={i + 1}", "video/mp4")
            for i, host in enumerate(
                ["a.example.com", "media.example.org", "b.example.com"] * 4
            )
        ]

        ranked = rank(candidates, domains)
        keys = [normalize_url(r.url) for r in ranked]
        flags = [is_priority(r.url, domains) for r in ranked]

        assert len(keys) == len(set(keys))
        assert flags == sorted(flags, reverse=True)

    def test_custom_domains(self):
        candidates = [
            _network("https://a.com/x.png", "image/png"),
            _network("https://b.com/y.png", "image/png"),
        ]

        assert [r.url for r in rank(candidates, ("b.com",))][0] == "https://b.com/y.png"

    def test_empty(self):
        assert rank([]) == []


def test_assemble_result_stamps_title():
    resources = rank(
        [
            _network("https://cdn.example.com/a.png", "image/png"),
            _network("https://cdn.example.com/b.mp4", "video/mp4"),
        ]
    )

    result = assemble_result("https://example.com", "Holiday", resources, partial=True)

    assert result.title == "Holiday"
    assert result.partial is True
    assert {r.title for r in result.results} == {"Holiday"}
    assert [r.url for r in result.results] == [r.url for r in resources]
    assert resources[0].title == ""
    assert result.to_dict()["results"][0] == {
        "url": "https://cdn.example.com/a.png",
        "type": "image",
        "contentType": "image/png",
        "source": "network-response",
        "title": "Holiday",
    }
