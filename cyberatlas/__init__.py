"""
cyberatlas package
==================

Aggregation and timeline-layout engine for a world map of cyber incidents.

- The CLI entry point is in `cyberatlas/cli.py`.
- The engine facade (selection, filters, colors, timeline) is in `cyberatlas/engine.py`.
- Dataset loading is in `cyberatlas/loader.py`.
"""

__version__ = '0.3.0'
