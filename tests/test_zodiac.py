import pytest

from app.services.zodiac import (
    BODY_NAMES,
    RASI_NAMES,
    body_name,
    map_longitude_to_zodiac,
    normalize_longitude,
    zodiac_name,
)

@pytest.mark.parametrize(
    "longitude, expected",
    [(0, 0), (29.999, 0), (30, 1), (359.999, 11), (-0.001, 11), (125.0, 4), (370, 0), (-5, 11), (720, 0)],
)
def test_boundaries_and_wraparound(longitude, expected):
    assert map_longitude_to_zodiac(longitude) == expected

@pytest.mark.parametrize("longitude", [0.0, 15.5, 29.999, 30.0, 187.25, 359.999, -0.001])
@pytest.mark.parametrize("k", [-3, -1, 1, 2, 10])
def test_periodic(longitude, k):
    assert map_longitude_to_zodiac(longitude) == map_longitude_to_zodiac(longitude + 360 * k)

def test_normalize_never_returns_360():
    assert normalize_longitude(-1e-15) == 0.0
    assert map_longitude_to_zodiac(-1e-15) == 0
    assert 0.0 <= normalize_longitude(-725.5) < 360.0

def test_names():
    assert len(RASI_NAMES) == 12
    assert zodiac_name(0) == "மேஷம்"
    assert zodiac_name(11) == "மீனம்"
    assert body_name("rahu") == "ராகு"
    assert body_name("pluto") == "pluto"

def test_tables_are_read_only():
    with pytest.raises(TypeError):
        BODY_NAMES["sun"] = "x"
