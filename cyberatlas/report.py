from __future__ import annotations

"""
Atlas report generator
----------------------
This module writes a DOCX report for the incidents currently displayed by an
`Atlas` engine.

Design goals:
- Keep the engine usable even if report dependencies are missing (lazy imports).
- Draw the timeline from the same layout the renderer uses (positions 0..100),
  so the report and the dashboard agree on where markers sit.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
import os
import tempfile
from collections import Counter
from datetime import datetime

from .engine import Atlas
from .selection import count_label
from .locations import resolve_location
from .models import Incident
from .severity import SEVERITY_CAPTIONS, SEVERITY_LEVELS, attack_color
from .timeline import axis_label


@dataclass
class ReportConfig:
    """High-level knobs to control how the report is written."""
    title: str = "Cyber Incidents Report"
    subtitle: str = "Worldwide Cyber Incidents (CLI)"
    dataset_name: str = "Incidents JSON export"

    # How many categories to show in bar charts / tables
    top_n: int = 10

    # How many rows to show in preview tables
    max_rows_preview: int = 15

    # Optional: list of CLI commands that produced the current view
    command_log: Optional[List[str]] = None


def generate_docx_report(engine: Atlas, out_path: str, *, config: Optional[ReportConfig] = None) -> str:
    """
    Generate a DOCX report + charts for the engine's displayed incidents.

    Raises ValueError when nothing is displayed.
    """
    config = config or ReportConfig()

    # Lazy imports: only required when "report" is used.
    try:
        from docx import Document
        from docx.shared import Pt, Inches
        from docx.enum.text import WD_ALIGN_PARAGRAPH
    except ImportError as e:
        raise ImportError(
            "Missing dependency: python-docx.\n"
            "Install it with: python -m pip install python-docx"
        ) from e

    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "Missing dependency: matplotlib.\n"
            "Install with: python -m pip install matplotlib"
        ) from e

    incidents = engine.displayed_incidents()
    if not incidents:
        raise ValueError("No incidents to report on (displayed list is empty).")

    layout = engine.timeline_layout()
    by_type = Counter(inc.attack_label() for inc in incidents)
    country_rows = displayed_country_rows(engine, incidents, config.top_n)

    # -----------------------------
    # 1) Charts
    # -----------------------------
    tmpdir = tempfile.mkdtemp(prefix="cyberatlas_report_")
    chart_paths: List[Tuple[str, str]] = []

    def _save(filename: str) -> str:
        path = os.path.join(tmpdir, filename)
        plt.tight_layout()
        plt.savefig(path, dpi=200)
        plt.close()
        return path

    if not layout.is_empty:
        fig, ax = plt.subplots(figsize=(10, 2.2))
        ax.axhline(0, color="#555555", linewidth=2, zorder=1)
        ax.scatter(
            [e.position for e in layout.entries],
            [0] * len(layout),
            c=[attack_color(e.incident.attack.type) for e in layout.entries],
            edgecolors="white",
            s=60,
            zorder=2,
        )
        ax.set_xlim(0, 100)
        ax.set_yticks([])
        ax.set_xticks([0, 100])
        ax.set_xticklabels([axis_label(layout.range_start), axis_label(layout.range_end)])
        ax.set_title(f"{engine.title()} {count_label(len(incidents))}")
        chart_paths.append(("Timeline", _save("timeline.png")))

    if len(by_type) > 1:
        top_types = by_type.most_common(config.top_n)
        plt.figure()
        plt.bar([k for k, _ in top_types], [v for _, v in top_types],
                color=[attack_color(k) for k, _ in top_types])
        plt.xticks(rotation=45, ha="right")
        plt.title(f"Top {config.top_n} Attack Types")
        plt.ylabel("Incidents")
        chart_paths.append(("Attack types", _save("attack_types.png")))

    # -----------------------------
    # 2) Build DOCX report
    # -----------------------------
    doc = Document()
    style = doc.styles["Normal"]
    style.font.name = "Calibri"
    style.font.size = Pt(11)

    def _center_title(text: str, size: int, bold: bool = False, italic: bool = False) -> None:
        p = doc.add_paragraph()
        r = p.add_run(text)
        r.bold = bold
        r.italic = italic
        r.font.size = Pt(size)
        p.alignment = WD_ALIGN_PARAGRAPH.CENTER

    def _kv(key: str, value: str) -> None:
        p = doc.add_paragraph()
        r = p.add_run(f"{key}: ")
        r.bold = True
        p.add_run(value)

    _center_title(config.title, 22, bold=True)
    _center_title(config.subtitle, 12, italic=True)

    doc.add_paragraph("")
    _kv("Dataset", config.dataset_name)
    _kv("View", engine.title())
    if engine.filters.is_active:
        _kv("Attack types", ", ".join(sorted(engine.filters.types)))
    _kv("Incidents displayed", str(len(incidents)))
    _kv("Incidents on timeline", str(len(layout)))
    if not layout.is_empty:
        _kv("Timeline range", f"{axis_label(layout.range_start)} to {axis_label(layout.range_end)}")

    if config.command_log:
        doc.add_paragraph("")
        doc.add_heading("Command log (reproducibility)", level=1)
        for line in config.command_log:
            doc.add_paragraph(line, style="List Bullet")

    # Severity caption + countries in view
    doc.add_paragraph("")
    doc.add_heading("Country severity", level=1)
    caption = doc.add_table(rows=1, cols=2)
    caption.rows[0].cells[0].text = "Severity"
    caption.rows[0].cells[1].text = "Meaning"
    for level in SEVERITY_LEVELS:
        row = caption.add_row().cells
        row[0].text = level.capitalize()
        row[1].text = SEVERITY_CAPTIONS[level]

    doc.add_paragraph("")
    doc.add_paragraph("Countries in this view. Severity follows the dataset-wide count, as on the map.")
    t = doc.add_table(rows=1, cols=4)
    h = t.rows[0].cells
    h[0].text = "Country"
    h[1].text = "In view"
    h[2].text = "Dataset total"
    h[3].text = "Severity"
    for iso3, in_view, total, level in country_rows:
        r = t.add_row().cells
        r[0].text = iso3
        r[1].text = str(in_view)
        r[2].text = str(total)
        r[3].text = level

    doc.add_paragraph("")
    doc.add_heading("Visualizations", level=1)
    for title, path in chart_paths:
        doc.add_paragraph(title)
        doc.add_picture(path, width=Inches(6.5))

    doc.add_paragraph("")
    doc.add_heading("Preview of timeline entries", level=1)
    t2 = doc.add_table(rows=1, cols=4)
    h = t2.rows[0].cells
    h[0].text = "Date"
    h[1].text = "Name"
    h[2].text = "Country"
    h[3].text = "Attack type"
    for entry in layout.entries[:config.max_rows_preview]:
        r = t2.add_row().cells
        r[0].text = entry.when.strftime("%Y-%m-%d")
        r[1].text = entry.incident.event.name
        r[2].text = entry.incident.event.primary_location
        r[3].text = entry.incident.attack_label()

    skipped = len(incidents) - len(layout)
    doc.add_heading("Notes", level=1)
    doc.add_paragraph(
        "Country counts include every incident with a resolvable location. "
        f"The timeline only shows incidents dated {engine.config.min_year}-{engine.config.max_year}"
        + (f"; {skipped} displayed incident(s) had no usable date." if skipped else ".")
    )

    from . import __version__
    doc.add_paragraph(f"cyberatlas version: {__version__}")
    doc.add_paragraph(f"Report generated at: {datetime.now().isoformat(timespec='seconds')}")

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    doc.save(out_path)
    return out_path


def displayed_country_rows(engine: Atlas, incidents: Sequence[Incident], top_n: int) -> List[Tuple[str, int, int, str]]:
    """(iso3, incidents in view, dataset total, severity) for the countries in view.

    Rows are ordered by the in-view count, largest first.
    """
    in_view = Counter(resolve_location(inc.event.primary_location) for inc in incidents)
    in_view.pop(None, None)
    return [
        (iso3, n, engine.country_count(iso3), engine.color_for_country(iso3))
        for iso3, n in in_view.most_common(top_n)
    ]
