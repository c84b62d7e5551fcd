import pytest

from cyberatlas.locations import ISO2_TO_ISO3, feature_iso3, feature_name, resolve_location


@pytest.mark.parametrize("code,expected", [
    ("US", "USA"),
    ("us", "USA"),
    ("Fr", "FRA"),
    ("GB", "GBR"),
    ("TW", "TWN"),
    ("HK", "HKG"),
])
def test_resolve_known_codes(code, expected):
    assert resolve_location(code) == expected


@pytest.mark.parametrize("code", ["", None, "ZZ", "USA", "U"])
def test_unresolvable_codes(code):
    assert resolve_location(code) is None


def test_table_is_read_only():
    with pytest.raises(TypeError):
        ISO2_TO_ISO3["ZZ"] = "ZZZ"


def test_feature_iso3_fallback_chain():
    assert feature_iso3({"properties": {"ISO_A3": "FRA", "ADM0_A3": "XXX"}}) == "FRA"
    assert feature_iso3({"properties": {"ADM0_A3": "NOR"}}) == "NOR"
    assert feature_iso3({"properties": {"ISO3166-1-Alpha-3": "DEU"}}) == "DEU"
    assert feature_iso3({"id": "ita", "properties": {}}) == "ITA"
    assert feature_iso3({"properties": {}}) is None


def test_feature_iso3_skips_placeholder():
    feature = {"properties": {"ISO_A3": "-99", "ADM0_A3": "FRA"}}
    assert feature_iso3(feature) == "FRA"


def test_feature_name():
    assert feature_name({"properties": {"name_en": "France", "ADMIN": "French Republic"}}) == "France"
    assert feature_name({"properties": {"ADMIN": "Norway"}}) == "Norway"
    assert feature_name({"properties": {}}) == "Unknown"
    assert feature_name({}) == "Unknown"
