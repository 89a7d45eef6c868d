from file_meta_lens.utils import media_utils


def test_fourcc_to_string() -> None:
    assert media_utils.fourcc_to_string(0x61766331) == "avc1"
    assert media_utils.fourcc_to_string(0x6D703461) == "mp4a"


def test_decode_itunes_track_number() -> None:
    assert media_utils.decode_itunes_track_number(b"\x00\x00\x00\x07\x00\x0c\x00\x00") == 7
    assert media_utils.decode_itunes_track_number(b"\x00\x00") is None


def test_parse_track_number_variants() -> None:
    assert media_utils.parse_track_number("3/12") == 3
    assert media_utils.parse_track_number((5, 10)) == 5
    assert media_utils.parse_track_number(["9"]) == 9
    assert media_utils.parse_track_number("side A") is None


def test_bitrate_and_frame_rate() -> None:
    assert media_utils.format_bitrate(320000) == "320 kbps"
    assert media_utils.format_bitrate("0") is None
    assert media_utils.format_frame_rate("30000/1001") == "29.97 fps"
    assert media_utils.format_frame_rate("0/0") is None
