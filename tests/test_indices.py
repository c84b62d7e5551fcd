from cyberatlas.indices import (
    build_country_index,
    build_indices,
    country_counts,
    filter_by_attack_types,
    flatten,
)
from cyberatlas.locations import resolve_location


def test_buckets_partition_resolvable_incidents(incidents):
    by_country = build_country_index(incidents)

    resolvable = [i.id for i in incidents if resolve_location(i.event.primary_location)]
    bucketed = [i.id for bucket in by_country.values() for i in bucket]

    assert sorted(bucketed) == sorted(resolvable)
    assert len(bucketed) == len(set(bucketed))


def test_unresolvable_locations_are_dropped(incidents):
    by_country = build_country_index(incidents)
    ids = {i.id for b in by_country.values() for i in b}
    assert "4" not in ids  # empty code
    assert "5" not in ids  # unknown code


def test_bucket_keeps_encounter_order(incidents):
    by_country = build_country_index(incidents)
    assert [i.id for i in by_country["USA"]] == ["1", "3"]
    assert list(by_country) == ["USA", "FRA", "BRA", "DEU", "JPN"]


def test_build_indices_counts(incidents):
    idx = build_indices(incidents)
    assert idx.unresolved == 2
    assert idx.resolved == 6
    assert sorted(idx.by_type) == ["Data Breach", "Malware", "Phishing", "Ransomware"]
    assert country_counts(idx.by_country)["USA"] == 2


def test_empty_filter_is_identity(incidents):
    by_country = build_country_index(incidents)
    assert filter_by_attack_types(by_country, frozenset()) is by_country


def test_filter_keeps_only_selected_types(incidents):
    by_country = build_country_index(incidents)
    out = filter_by_attack_types(by_country, {"Ransomware"})

    assert set(out) == {"USA", "FRA"}
    assert [i.id for i in out["USA"]] == ["3"]
    assert all(i.attack.type == "Ransomware" for b in out.values() for i in b)


def test_filter_never_adds_countries_or_empty_buckets(incidents):
    by_country = build_country_index(incidents)
    for types in ({"Phishing"}, {"Malware", "Data Breach"}, {"Nope"}):
        out = filter_by_attack_types(by_country, types)
        assert set(out) <= set(by_country)
        assert all(out.values())


def test_filter_does_not_touch_input(incidents):
    by_country = build_country_index(incidents)
    before = {k: list(v) for k, v in by_country.items()}
    filter_by_attack_types(by_country, {"Phishing"})
    assert by_country == before


def test_flatten_follows_mapping_order(incidents):
    by_country = build_country_index(incidents)
    assert [i.id for i in flatten(by_country)] == ["1", "3", "2", "6", "7", "8"]
