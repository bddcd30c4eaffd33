from datetime import datetime, timezone

import pytest

from vhalclient.gps import (
    GeoFix,
    GpsCommand,
    GpsDrift,
    format_gga,
    format_nmea,
    parse_geo_fix,
)


def _epoch(hour, minute, second):
    return datetime(1970, 1, 1, hour, minute, second, tzinfo=timezone.utc).timestamp()


def test_gps_command_values():
    assert [int(c) for c in GpsCommand] == [20, 21, 22]
    assert GpsCommand(21) is GpsCommand.START


def test_parse_longitude_latitude_only():
    assert parse_geo_fix("11.25 48.5") == GeoFix(11.25, 48.5, None, 1)


def test_parse_with_altitude():
    fix = parse_geo_fix("11.25\t48.5 546")
    assert fix.altitude == 546.0
    assert fix.satellites == 1


def test_parse_four_values_uses_fourth_for_satellites():
    assert parse_geo_fix("1 2 3 4").satellites == 4


def test_parse_five_values_uses_fifth_for_satellites():
    assert parse_geo_fix("1 2 3 4 7").satellites == 7


def test_parse_ignores_values_after_fifth():
    assert parse_geo_fix("1 2 3 4 7 99 junk") == GeoFix(1.0, 2.0, 3.0, 7)


def test_parse_trailing_blanks_accepted():
    assert parse_geo_fix("1 2  ") == GeoFix(1.0, 2.0)


@pytest.mark.parametrize(
    "args",
    ["", "1", "1 x", "1,2", "abc", "1 2 3 13", "1 2 3 0", "1 2 3 2.5", "1 2 3 4 nan"],
)
def test_parse_rejects_bad_arguments(args):
    with pytest.raises(ValueError):
        parse_geo_fix(args)


def test_parse_rejects_none():
    with pytest.raises(ValueError):
        parse_geo_fix(None)


def test_format_gga_worked_example():
    fix = GeoFix(11.25, 48.5, 546.0, 1)
    assert (
        format_gga(fix, now=0)
        == "$GPGGA,000000,4830.0000,N,1115.0000,E,1,01,,5e+02,M,0.,M,,,*47\n"
    )


def test_format_gga_time_of_day():
    sentence = format_gga(GeoFix(0.0, 0.0), now=_epoch(12, 34, 56))
    assert sentence.startswith("$GPGGA,123456,")


def test_format_gga_southern_western_hemispheres():
    fields = format_gga(GeoFix(-11.25, -48.5), now=0).split(",")
    assert fields[2:6] == ["4830.0000", "S", "1115.0000", "W"]


def test_format_gga_without_altitude_has_empty_fields():
    sentence = format_gga(GeoFix(11.25, 48.5, None, 12), now=0)
    assert sentence.endswith(",1,12,,,,,,,,*47\n")


def test_format_gga_field_count_is_stable():
    with_alt = format_gga(GeoFix(1.0, 2.0, 3.0), now=0)
    without_alt = format_gga(GeoFix(1.0, 2.0), now=0)
    assert with_alt.count(",") == without_alt.count(",")


def test_format_nmea_appends_newline():
    assert format_nmea("$GPGGA,abc") == "$GPGGA,abc\n"
    assert format_nmea("") == "\n"


def test_format_nmea_limits():
    assert format_nmea("a" * 1023) == "a" * 1023 + "\n"
    with pytest.raises(ValueError):
        format_nmea("a" * 1024)
    with pytest.raises(ValueError):
        format_nmea(None)


def test_drift_initial_args_from_source_defaults():
    drift = GpsDrift(121.38215, 31.07147, 4)
    assert drift.geo_fix_args() == "121.38215 31.07147 4.0 5 6"


def test_drift_ceilings():
    drift = GpsDrift(121.38215, 31.07147, 4)
    assert drift.longitude_max == 122
    assert drift.latitude_max == 32
    assert drift.altitude_max == 1004


def test_drift_ceilings_clamped_to_ranges():
    drift = GpsDrift(-200.0, 95.0, 8000.0)
    assert drift.longitude_max == -180
    assert drift.latitude_max == 90
    assert drift.altitude_max == 8848


def test_drift_step_moves_upward():
    drift = GpsDrift(10.0, 20.0, 30.0)
    longitude, latitude, altitude = drift.step()
    assert longitude > 10.0
    assert latitude > 20.0
    assert altitude == 31.0
    assert (drift.longitude, drift.latitude, drift.altitude) == (longitude, latitude, altitude)


def test_drift_stops_at_ceiling():
    drift = GpsDrift(0.99999, 0.99999, 8848.0)
    for _ in range(5):
        drift.step()
    assert drift.longitude == 1.0
    assert drift.latitude == 1.0
    assert drift.altitude == 8848.0


def test_drift_args_parse_and_format():
    drift = GpsDrift(121.38215, 31.07147, 4)
    drift.step()
    fix = parse_geo_fix(drift.geo_fix_args())
    assert fix.satellites == 6
    assert fix.longitude == pytest.approx(drift.longitude, abs=1e-5)
    assert fix.latitude == pytest.approx(drift.latitude, abs=1e-5)
    assert fix.altitude == 5.0
    sentence = format_gga(fix, now=0)
    assert sentence.startswith("$GPGGA,000000,")
    assert ",N," in sentence and ",E," in sentence
    assert ",1,06," in sentence