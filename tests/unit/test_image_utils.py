from file_meta_lens.utils import image_utils


def test_shutter_speed_formatting() -> None:
    assert image_utils.format_shutter_speed(0.004) == "1/250"
    assert image_utils.format_shutter_speed(0.5) == "1/2"
    assert image_utils.format_shutter_speed(2.0) == "2.0s"
    assert image_utils.format_shutter_speed(0.8) == "0.8s"
    assert image_utils.format_shutter_speed(0.6) == "1/2"
    assert image_utils.format_shutter_speed(0) is None


def test_aperture_from_apex() -> None:
    assert image_utils.format_aperture(image_utils.aperture_from_apex(4.0)) == "f/4.0"
    assert image_utils.format_aperture(1.8) == "f/1.8"


def test_orientation_label() -> None:
    assert image_utils.orientation_label(1) == "Normal"
    assert image_utils.orientation_label(6) == "Rotated 90° CW"
    assert image_utils.orientation_label(9) is None
    assert image_utils.orientation_label(None) is None


def test_to_float_handles_rationals() -> None:
    assert image_utils.to_float((1, 4)) == 0.25
    assert image_utils.to_float((1, 0)) is None
    assert image_utils.to_float("2.5") == 2.5
    assert image_utils.to_float("abc") is None


def test_gps_formatting() -> None:
    degrees = image_utils.dms_to_degrees(((25, 1), (2, 1), (0, 1)))
    assert abs(degrees - 25.033333) < 1e-5
    assert image_utils.format_gps_coordinate(degrees, "N") == "25.033333° N"
    assert image_utils.format_gps_coordinate(-121.5, None) == "121.500000°"
    assert image_utils.format_gps_altitude(12.0, 0) == "12.0 m"
    assert image_utils.format_gps_altitude(3.0, b"\x01") == "3.0 m below sea level"


def test_decode_text_strips_nulls() -> None:
    assert image_utils.decode_text(b"Canon\x00") == "Canon"
    assert image_utils.decode_text("   ") is None
