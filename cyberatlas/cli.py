"""
cyberatlas Command Line Interface (CLI)
=======================================

This file provides the interactive terminal program you run like:

    python -m cyberatlas.cli --incidents "data/incidents.json" --geojson "data/countries.json"

It demonstrates:
- Argument parsing (argparse)
- A REPL loop (Read-Eval-Print Loop) for commands
- Mapping user commands to engine methods (selection, filters, timeline, report)

The CLI DOES NOT modify the dataset. It loads it once and works on in-memory
selection and filter state.
"""

from __future__ import annotations
import argparse
import logging
import shlex
from typing import Any, Dict, List, Optional

from .engine import Atlas
from .indices import build_indices
from .loader import load_country_features, load_incidents_json
from .regions import WORLD, region_of
from .selection import count_label
from .severity import SEVERITY_CAPTIONS
from .timeline import axis_label

HELP = """
cyberatlas commands (grouped)
-----------------------------

1) View / Inspect
   help
   stats
   types                            (attack types in the dataset)
   show [n]                         (displayed incidents, default 10)
   timeline [n]                     (positioned timeline entries, default 10)
   color <ISO3>                     (example: color USA)
   colors [n]                       (countries by incident count)

2) Selection
   select country <ISO3>            (example: select country FRA)
   select region "<Region>"         (example: select region "South America")
   clear                            (show the whole world)

3) Attack-type filters
   toggle "<Attack Type>"           (example: toggle "Ransomware")
   filters clear                    (no filter: show all types)
   filters all                      (select every type)

4) Export / Report (current view)
   export csv "<out.csv>"
   export json "<out.json>"
   report "<out.docx>"

5) History
   undo
   redo

6) Exit
   quit
"""


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the cyberatlas CLI.

    1) Load dataset
    2) Build indices
    3) Start an interactive REPL
    """
    ap = argparse.ArgumentParser(description="Explore cyber incidents by country, region and time.")
    ap.add_argument("--incidents", required=True, help="Path to the incidents JSON export")
    ap.add_argument("--geojson", help="Optional GeoJSON country features (for 'colors')")
    ap.add_argument("--verbose", action="store_true", help="Log dropped records and timings")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    print("Loading dataset...")
    incidents = load_incidents_json(args.incidents)
    idx = build_indices(incidents)
    engine = Atlas(incidents=incidents, idx=idx, dataset_path=args.incidents)
    features = load_country_features(args.geojson) if args.geojson else None

    print(f"Loaded {len(incidents)} incidents ({idx.unresolved} without a known country). Type 'help' for commands.")
    while True:
        try:
            line = input("atlas> ")
            stripped = line.strip()
            if stripped:
                cmd0 = stripped.split()[0].lower()
                if cmd0 not in ("help", "show", "timeline", "types", "stats", "color", "colors", "quit"):
                    engine.command_log.append(stripped)
        except EOFError:
            break
        if not line.strip():
            continue
        if line.strip().lower() in ("quit", "exit"):
            break
        try:
            handle(engine, line, features=features)
        except Exception as e:
            print(f"Error: {e}")


def handle(engine: Atlas, line: str, features: Optional[List[Dict[str, Any]]] = None) -> None:
    """Handle one CLI command line.

    This parses the command and calls the appropriate engine method.
    """
    parts = shlex.split(line)
    cmd = parts[0].lower()

    if cmd == "help":
        print(HELP)
        return

    if cmd == "stats":
        shown = engine.displayed_incidents()
        print(f"{engine.title()} {count_label(len(shown))}")
        print(f"Incidents: {len(engine.incidents)} | Countries: {len(engine.idx.by_country)} | "
              f"Types: {len(engine.idx.by_type)} | Unresolved locations: {engine.idx.unresolved}")
        if engine.filters.is_active:
            print(f"Active attack-type filter: {', '.join(sorted(engine.filters.types))}")
        return

    if cmd == "types":
        for t in engine.attack_types():
            mark = "x" if t in engine.filters.types else " "
            print(f"[{mark}] {t or '(none)'} ({len(engine.idx.by_type[t])})")
        return

    if cmd == "select":
        if len(parts) < 3:
            raise ValueError('usage: select country <ISO3> | select region "<Region>"')
        kind = parts[1].lower()
        target = " ".join(parts[2:])
        if kind == "country":
            engine.select_country(target)
        elif kind == "region":
            engine.select_region(target)
        else:
            raise ValueError("select kind must be: country, region")
        print(f"{engine.title()} {count_label(len(engine.displayed_incidents()))}")
        return

    if cmd in ("clear", "world"):
        engine.clear_selection()
        print(f"{engine.title()} {count_label(len(engine.displayed_incidents()))}")
        return

    if cmd == "toggle":
        if len(parts) < 2:
            raise ValueError('usage: toggle "<Attack Type>"')
        t = " ".join(parts[1:])
        if t not in engine.idx.by_type:
            raise ValueError(f"Unknown attack type {t!r}. Use 'types' to list them.")
        engine.toggle_type(t)
        state = "on" if t in engine.filters.types else "off"
        print(f"Filter {t!r} {state}. Displayed={len(engine.displayed_incidents())}")
        return

    if cmd == "filters":
        sub = parts[1].lower() if len(parts) >= 2 else ""
        if sub == "clear":
            engine.clear_filters()
        elif sub == "all":
            engine.select_all_types()
        else:
            raise ValueError("filters sub-command must be: clear, all")
        print(f"Filters {sub}. Displayed={len(engine.displayed_incidents())}")
        return

    if cmd == "undo":
        print("Undone." if engine.undo() else "Nothing to undo.")
        return

    if cmd == "redo":
        print("Redone." if engine.redo() else "Nothing to redo.")
        return

    if cmd == "show":
        n = int(parts[1]) if len(parts) >= 2 else 10
        rows = engine.displayed_incidents()
        print(f"{engine.title()} {count_label(len(rows))}")
        for inc in rows[:n]:
            print(f"[{inc.id}] {inc.event.primary_location or '??'} | {inc.attack_label()} | "
                  f"{inc.timeline_date() or '-'} | {inc.event.name}")
        return

    if cmd == "timeline":
        n = int(parts[1]) if len(parts) >= 2 else 10
        layout = engine.timeline_layout()
        if layout.is_empty:
            print("No incidents to display")
            return
        print(f"{engine.title()} {count_label(len(layout))}: "
              f"{axis_label(layout.range_start)} -> {axis_label(layout.range_end)}")
        for e in layout.entries[:n]:
            print(f"{e.position:6.2f}% {e.when:%Y-%m-%d} | {e.incident.attack_label()} | {e.incident.event.name}")
        return

    if cmd == "color":
        if len(parts) < 2:
            raise ValueError("usage: color <ISO3>")
        iso3 = parts[1].upper()
        level = engine.color_for_country(iso3)
        region = region_of(iso3, engine.regions) or WORLD
        print(f"{iso3} ({region}): {engine.country_count(iso3)} incidents -> {level} ({SEVERITY_CAPTIONS[level]})")
        return

    if cmd == "colors":
        n = int(parts[1]) if len(parts) >= 2 else 20
        if features:
            rows = [(s.iso3 or "?", s.name, s.count, s.severity) for s in engine.country_summaries(features)]
        else:
            rows = [(iso3, iso3, c, engine.color_for_country(iso3)) for iso3, c in engine.country_counts().items()]
        rows.sort(key=lambda r: r[2], reverse=True)
        for iso3, name, count, level in rows[:n]:
            print(f"{iso3:>4} {name[:30]:<30} {count:>6} {level}")
        return

    if cmd == "export":
        if len(parts) < 3:
            print('Usage: export csv "out.csv"  OR  export json "out.json"')
            return
        fmt = parts[1].lower()
        out_path = parts[2]
        if fmt == "csv":
            n = engine.export_csv(out_path)
        elif fmt == "json":
            n = engine.export_json(out_path)
        else:
            print("Unknown export format. Use: csv or json")
            return
        print(f"Exported {n} timeline entries to {out_path}")
        return

    if cmd == "report":
        from .report import ReportConfig, generate_docx_report
        if len(parts) < 2:
            raise ValueError('usage: report "<out.docx>"')
        cfg = ReportConfig(command_log=engine.command_log)
        generate_docx_report(engine, parts[1], config=cfg)
        print(f"Report written to {parts[1]}")
        return

    print("Unknown command. Type 'help'.")


if __name__ == "__main__":
    main()
