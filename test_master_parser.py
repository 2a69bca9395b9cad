#!/usr/bin/env python3
"""Test master playlist parsing and variant stream aggregation."""

import sys

from hlsmanifest import PlaylistKind, decode, decode_master, detect_kind
from hlsmanifest.master_parser import MasterPlaylistParser, StreamAggregator
from hlsmanifest.models import VariantStream

SAMPLE_MASTER = """#EXTM3U
#EXT-X-VERSION:6
#EXT-X-INDEPENDENT-SEGMENTS
#EXT-X-SESSION-KEY:METHOD=SAMPLE-AES,URI="skd://key-1",KEYFORMAT="com.apple.streamingkeydelivery",KEYFORMATVERSIONS="1"
#EXT-X-MEDIA:TYPE=SUBTITLES,GROUP-ID="subs",NAME="English",LANGUAGE="en",FORCED=NO,URI="subs/en.m3u8"
#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aac",NAME="English",LANGUAGE="en",DEFAULT=YES,AUTOSELECT=YES,CHANNELS="2",URI="audio/aac/en.m3u8"
#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="ac3",NAME="English 5.1",LANGUAGE="en",AUTOSELECT=yes,CHANNELS="6",URI="audio/ac3/en.m3u8"
#EXT-X-STREAM-INF:BANDWIDTH=5000000,AVERAGE-BANDWIDTH=4000000,CODECS="avc1.640028,mp4a.40.2",RESOLUTION=1920x1080,FRAME-RATE=23.976,AUDIO="aac",SUBTITLES="subs"
video/1080p.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=5400000,AVERAGE-BANDWIDTH=4400000,CODECS="avc1.640028,ec-3",RESOLUTION=1920x1080,FRAME-RATE=23.976,AUDIO="ac3",SUBTITLES="subs"
video/1080p.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=1200000,CODECS="avc1.4d401f,mp4a.40.2",RESOLUTION=854x480,AUDIO="aac"
video/480p.m3u8
#EXT-X-STREAM-INF:BANDWIDTH=2500000,AVERAGE-BANDWIDTH=2000000,CODECS="avc1.4d401f,mp4a.40.2",RESOLUTION=1280x720,AUDIO="aac"
video/720p.m3u8
"""


def _stream(playlist, uri):
    return next(stream for stream in playlist.streams if stream.uri == uri)


def test_scenario_two_audio_groups_one_stream():
    playlist = MasterPlaylistParser.parse(
        [
            '#EXT-X-STREAM-INF:BANDWIDTH=5000000,AUDIO="aac"',
            "v.m3u8",
            '#EXT-X-STREAM-INF:BANDWIDTH=4500000,AUDIO="ac3"',
            "v.m3u8",
        ]
    )

    assert len(playlist.streams) == 1
    stream = playlist.streams[0]
    assert stream.bandwidth == 4500000
    assert stream.audio == ["aac", "ac3"]
    assert stream.id == 0


def test_scenario_unparseable_bandwidth():
    playlist = MasterPlaylistParser.parse(
        [
            "#EXT-X-STREAM-INF:BANDWIDTH=abc",
            "a.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH=100,CODECS=\"avc1\"",
            "a.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH=oops,CODECS=\"hvc1\"",
            "b.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH=-",
            "b.m3u8",
        ]
    )

    assert len(playlist.streams) == 2
    assert playlist.streams[0].bandwidth == 0
    assert playlist.streams[0].codecs == ""
    assert playlist.streams[1].bandwidth == 0
    assert playlist.streams[1].codecs == "hvc1"


def test_bandwidth_must_be_plain_digits():
    playlist = MasterPlaylistParser.parse(
        [
            '#EXT-X-STREAM-INF:BANDWIDTH=900,CODECS="avc1"',
            "v.m3u8",
            '#EXT-X-STREAM-INF:BANDWIDTH=1_0,CODECS="hvc1"',
            "v.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH= 5,AVERAGE-BANDWIDTH=4_0",
            "w.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH=١٢,AVERAGE-BANDWIDTH=+7",
            "x.m3u8",
        ]
    )

    v = _stream(playlist, "v.m3u8")
    assert v.bandwidth == 0
    assert v.codecs == "hvc1"

    w = _stream(playlist, "w.m3u8")
    assert w.bandwidth == 0
    assert w.average_bandwidth == 0

    x = _stream(playlist, "x.m3u8")
    assert x.bandwidth == 0
    assert x.average_bandwidth == 7


def test_sample_master_aggregation():
    playlist = decode_master(SAMPLE_MASTER)

    assert len(playlist.medias) == 3
    assert len(playlist.streams) == 3
    assert [media.id for media in playlist.medias] == [0, 1, 2]
    assert [stream.id for stream in playlist.streams] == [3, 4, 5]

    full_hd = _stream(playlist, "video/1080p.m3u8")
    assert full_hd.bandwidth == 5000000
    assert full_hd.average_bandwidth == 4000000
    assert full_hd.codecs == "avc1.640028,mp4a.40.2"
    assert full_hd.resolution == "1920x1080"
    assert full_hd.frame_rate == "23.976"
    assert full_hd.subtitles == "subs"
    assert full_hd.audio == ["aac", "ac3"]

    assert _stream(playlist, "video/480p.m3u8").audio == ["aac"]


def test_renditions_and_session_keys():
    playlist = decode_master(SAMPLE_MASTER)
    subs, aac, ac3 = playlist.medias

    assert subs.type == "SUBTITLES"
    assert subs.forced is False
    assert aac.default is True
    assert aac.autoselect is True
    assert aac.channels == "2"
    assert aac.language == "en"
    assert ac3.autoselect is False
    assert ac3.default is False
    assert ac3.uri == "audio/ac3/en.m3u8"

    assert len(playlist.session_keys) == 1
    key = playlist.session_keys[0]
    assert key.method == "SAMPLE-AES"
    assert key.uri == "skd://key-1"
    assert key.key_format_versions == "1"


def test_lower_bandwidth_overwrites_all_primary_attributes():
    playlist = MasterPlaylistParser.parse(
        [
            '#EXT-X-STREAM-INF:BANDWIDTH=900,AVERAGE-BANDWIDTH=800,CODECS="a",RESOLUTION=1x1,FRAME-RATE=30,SUBTITLES="s"',
            "x.m3u8",
            '#EXT-X-STREAM-INF:BANDWIDTH=500,CODECS="b"',
            "x.m3u8",
        ]
    )

    stream = playlist.streams[0]
    assert stream.bandwidth == 500
    assert stream.average_bandwidth == 0
    assert stream.codecs == "b"
    assert stream.resolution == ""
    assert stream.frame_rate == ""
    assert stream.subtitles == ""
    assert stream.audio == []


def test_equal_bandwidth_keeps_first_seen():
    playlist = MasterPlaylistParser.parse(
        [
            '#EXT-X-STREAM-INF:BANDWIDTH=700,AVERAGE-BANDWIDTH=600,CODECS="first",AUDIO="a1"',
            "x.m3u8",
            '#EXT-X-STREAM-INF:BANDWIDTH=700,AVERAGE-BANDWIDTH=100,CODECS="second",AUDIO="a2"',
            "x.m3u8",
        ]
    )

    stream = playlist.streams[0]
    assert stream.codecs == "first"
    assert stream.average_bandwidth == 600
    assert stream.audio == ["a1", "a2"]


def test_aggregation_invariants():
    tags = [
        ("a.m3u8", 300, "g1"),
        ("b.m3u8", 200, ""),
        ("a.m3u8", 100, "g2"),
        ("c.m3u8", 50, "g1"),
        ("a.m3u8", 100, ""),
        ("b.m3u8", 250, "g3"),
        ("a.m3u8", 400, "g1"),
    ]
    lines = []
    for uri, bandwidth, audio in tags:
        attrs = f"BANDWIDTH={bandwidth}"
        if audio:
            attrs += f',AUDIO="{audio}"'
        lines.extend([f"#EXT-X-STREAM-INF:{attrs}", uri])

    playlist = MasterPlaylistParser.parse(lines)

    uris = {uri for uri, _, _ in tags}
    assert len(playlist.streams) == len(uris)
    for stream in playlist.streams:
        contributing = [tag for tag in tags if tag[0] == stream.uri]
        assert stream.bandwidth == min(bandwidth for _, bandwidth, _ in contributing)
        assert len(stream.audio) == sum(1 for _, _, audio in contributing if audio)
    assert _stream(playlist, "a.m3u8").audio == ["g1", "g2", "g1"]


def test_counter_shared_in_first_appearance_order():
    playlist = MasterPlaylistParser.parse(
        [
            '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="b"',
            "#EXT-X-STREAM-INF:BANDWIDTH=1",
            "one.m3u8",
            '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="a"',
            "#EXT-X-STREAM-INF:BANDWIDTH=2",
            "one.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH=3",
            "two.m3u8",
        ]
    )

    assert [media.id for media in playlist.medias] == [0, 2]
    assert [stream.id for stream in playlist.streams] == [1, 3]


def test_trailing_stream_inf_is_dropped():
    playlist = MasterPlaylistParser.parse(
        ["#EXT-X-STREAM-INF:BANDWIDTH=1", "a.m3u8", "#EXT-X-STREAM-INF:BANDWIDTH=2"]
    )

    assert len(playlist.streams) == 1
    assert playlist.streams[0].bandwidth == 1


def test_each_parse_has_its_own_state():
    first = MasterPlaylistParser.parse(["#EXT-X-STREAM-INF:BANDWIDTH=1", "a.m3u8"])
    second = MasterPlaylistParser.parse(["#EXT-X-STREAM-INF:BANDWIDTH=1", "a.m3u8"])

    assert first.streams[0].id == second.streams[0].id == 0
    assert first.streams[0] is not second.streams[0]


def test_aggregator_directly():
    aggregator = StreamAggregator()
    first = aggregator.add_stream({"BANDWIDTH": "10", "AUDIO": "x"}, "s.m3u8")
    again = aggregator.add_stream({"BANDWIDTH": "5"}, "s.m3u8")

    assert first is again
    assert aggregator.playlist.streams == [first]
    assert first.bandwidth == 5
    assert aggregator.next_id() == 1


def test_sort_orders_by_sort_bandwidth_and_group():
    playlist = decode_master(SAMPLE_MASTER)
    playlist.sort()

    assert [stream.uri for stream in playlist.streams] == [
        "video/480p.m3u8",
        "video/720p.m3u8",
        "video/1080p.m3u8",
    ]
    assert [media.group_id for media in playlist.medias] == ["aac", "ac3", "subs"]


def test_sort_is_stable():
    playlist = MasterPlaylistParser.parse(
        [
            "#EXT-X-STREAM-INF:BANDWIDTH=900,AVERAGE-BANDWIDTH=500",
            "first.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH=300",
            "low.m3u8",
            "#EXT-X-STREAM-INF:BANDWIDTH=500",
            "second.m3u8",
            '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aud",NAME="one"',
            '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aud",NAME="two"',
            '#EXT-X-MEDIA:TYPE=SUBTITLES,GROUP-ID=""',
        ]
    )
    playlist.sort()
    order = [stream.uri for stream in playlist.streams]
    media_order = [media.name for media in playlist.medias]

    assert order == ["low.m3u8", "first.m3u8", "second.m3u8"]
    assert media_order == ["", "one", "two"]

    playlist.sort()
    assert [stream.uri for stream in playlist.streams] == order
    assert [media.name for media in playlist.medias] == media_order


def test_resolve_uris_master():
    playlist = decode_master(SAMPLE_MASTER)
    playlist.resolve_uris("https://example.com/hls/master.m3u8")

    assert _stream(playlist, "https://example.com/hls/video/1080p.m3u8").audio == ["aac", "ac3"]
    assert playlist.medias[0].uri == "https://example.com/hls/subs/en.m3u8"
    assert playlist.session_keys[0].uri == "skd://key-1"


def test_summaries():
    playlist = decode_master(SAMPLE_MASTER)

    assert str(_stream(playlist, "video/1080p.m3u8")) == (
        "average_bandwidth = 4000000\n"
        "bandwidth = 5000000\n"
        "resolution = 1920x1080\n"
        "codecs = avc1.640028\n"
        "id = 3"
    )
    assert str(playlist.medias[1]) == "type = AUDIO\nname = English\nlang = en\ngroup = aac\nid = 1"
    assert str(VariantStream(id=7)) == "bandwidth = 0\nid = 7"


def test_detect_kind():
    assert detect_kind(SAMPLE_MASTER) is PlaylistKind.MASTER
    assert detect_kind("#EXTM3U\n#EXTINF:1,\na.ts\n") is PlaylistKind.MEDIA
    assert detect_kind(["#EXTM3U"]) is PlaylistKind.MEDIA
    assert decode(SAMPLE_MASTER).kind is PlaylistKind.MASTER


if __name__ == "__main__":
    for name, func in list(globals().items()):
        if name.startswith("test_") and callable(func):
            func()
            print(f"✓ {name} passed")
    sys.exit(0)
