from cyberatlas.engine import Atlas
from cyberatlas.indices import build_indices
from cyberatlas.loader import incidents_from_records
from cyberatlas.report import displayed_country_rows

from conftest import make_record


def test_rows_cover_only_countries_in_view(atlas):
    atlas.select_region("Europe")
    rows = displayed_country_rows(atlas, atlas.displayed_incidents(), top_n=10)
    assert rows == [("FRA", 1, 1, "low"), ("DEU", 1, 1, "low")]


def test_rows_keep_dataset_wide_severity():
    records = [make_record(str(i), "US", attack_type="Phishing") for i in range(25)]
    records.append(make_record("x", "US", attack_type="Malware"))
    incs = incidents_from_records(records)
    engine = Atlas(incidents=incs, idx=build_indices(incs))
    engine.toggle_type("Malware")

    rows = displayed_country_rows(engine, engine.displayed_incidents(), top_n=10)
    assert rows == [("USA", 1, 26, "medium")]
