import json

import pytest

from cyberatlas import cli


def test_select_and_title(atlas, capsys):
    cli.handle(atlas, "select country usa")
    assert "Incidents Timeline - USA (2 incidents)" in capsys.readouterr().out

    cli.handle(atlas, 'select region "South America"')
    assert "Incidents Timeline - South America (1 incident)" in capsys.readouterr().out

    cli.handle(atlas, "clear")
    assert "Global Incidents Timeline (6 incidents)" in capsys.readouterr().out


def test_bad_selection(atlas):
    with pytest.raises(ValueError):
        cli.handle(atlas, "select planet Mars")
    with pytest.raises(ValueError):
        cli.handle(atlas, 'select region "Atlantis"')


def test_toggle_and_filters(atlas, capsys):
    cli.handle(atlas, 'toggle "Data Breach"')
    assert "Filter 'Data Breach' on. Displayed=1" in capsys.readouterr().out
    cli.handle(atlas, "filters clear")
    assert "Displayed=6" in capsys.readouterr().out
    with pytest.raises(ValueError):
        cli.handle(atlas, 'toggle "Nope"')
    with pytest.raises(ValueError):
        cli.handle(atlas, "filters maybe")


def test_timeline_and_color(atlas, capsys):
    cli.handle(atlas, "timeline 2")
    out = capsys.readouterr().out
    assert "Global Incidents Timeline (4 incidents)" in out
    assert out.count("%") == 2

    cli.handle(atlas, "color USA")
    assert "USA (North America): 2 incidents -> low" in capsys.readouterr().out

    cli.handle(atlas, "select country CAN")
    capsys.readouterr()
    cli.handle(atlas, "timeline")
    assert "No incidents to display" in capsys.readouterr().out


def test_colors_from_features(atlas, capsys):
    features = [{"properties": {"ISO_A3": "USA", "name_en": "United States"}}]
    cli.handle(atlas, "colors", features=features)
    out = capsys.readouterr().out
    assert "United States" in out and "low" in out


def test_undo_redo_commands(atlas, capsys):
    cli.handle(atlas, "undo")
    assert "Nothing to undo." in capsys.readouterr().out
    cli.handle(atlas, "select country FRA")
    cli.handle(atlas, "undo")
    assert "Undone." in capsys.readouterr().out
    assert atlas.selection.is_empty


def test_export_json_command(atlas, tmp_path, capsys):
    out = tmp_path / "view.json"
    cli.handle(atlas, f'export json "{out}"')
    assert "Exported 4 timeline entries" in capsys.readouterr().out
    assert len(json.loads(out.read_text(encoding="utf-8"))["entries"]) == 4


def test_unknown_command(atlas, capsys):
    cli.handle(atlas, "dance")
    assert "Unknown command" in capsys.readouterr().out


def test_main_runs_repl(tmp_path, records, monkeypatch, capsys):
    path = tmp_path / "incidents.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    lines = iter(["stats", "select country USA", "quit"])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(lines))

    cli.main(["--incidents", str(path)])

    out = capsys.readouterr().out
    assert "Loaded 8 incidents (2 without a known country)" in out
    assert "Incidents Timeline - USA (2 incidents)" in out
