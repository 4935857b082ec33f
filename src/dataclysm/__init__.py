"""
dataclysm: LLM-assisted cleaning of CSV datasets.

The package is split by concern:
- `dataclysm.io`        CSV parsing/export and cell type inference
- `dataclysm.schema`    row/dataset/analysis models and schema validation
- `dataclysm.llm`       Gemini client and prompt construction
- `dataclysm.profiling` local column profiles and chart aggregation
- `dataclysm.pipeline`  analysis/transform collaborators and the cleaning session

Only the deterministic core is re-exported here; the LLM-backed layers are
imported explicitly from their sub-packages.
"""

from dataclysm.io import parse_csv, export_csv
from dataclysm.schema import validate_dataset

__version__ = "0.1.0"

__all__ = [
    "parse_csv",
    "export_csv",
    "validate_dataset",
    "__version__",
]
