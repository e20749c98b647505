"""BBTemp: personal basal body temperature tracker.

Subpackages:
    tracker/ — Entry store, range navigation, cycle analysis, observable state
    storage/ — Key-value persistence and the entry codec
    export/  — CSV, chart and PDF report export
"""

__version__ = "0.1.0"
