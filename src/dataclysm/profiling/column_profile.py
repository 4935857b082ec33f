from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

import pandas as pd

from dataclysm.io.cells import cell_kind, stringify_cell
from dataclysm.schema.models import Dataset


# ============================================================
# Config
# ============================================================

@dataclass
class ColumnProfileConfig:
    """
    Configuration container for column profiling.

    Controls how many sample values are kept per column and how many
    columns are rendered into the prompt profile.
    """

    sample_values: int = 3
    top_columns: int = 60


@dataclass
class ColumnProfile:
    """
    Locally computed statistics for one column.

    These are observed facts about the parsed cells, handed to the
    analysis model as context. They are not the column descriptors
    used for validation, which come back from the model.
    """

    name: str
    count: int = 0
    missing: int = 0
    unique: int = 0

    # kind ("number"/"boolean"/"string") -> occurrences
    kinds: Counter = field(default_factory=Counter)

    samples: List[str] = field(default_factory=list)

    @property
    def dominant_kind(self) -> str:
        if not self.kinds:
            return "empty"
        if len(self.kinds) > 1:
            return "mixed"
        return next(iter(self.kinds))


def dataset_to_frame(dataset: Dataset) -> pd.DataFrame:
    """
    Build an object-dtype dataframe from a dataset.

    Cells keep their Python types so that booleans, numbers and strings
    stay distinguishable; the row id becomes the index.
    """
    headers = list(dict.fromkeys(dataset.headers))
    data = {h: [r.cells.get(h) for r in dataset.rows] for h in headers}
    return pd.DataFrame(data, columns=headers, index=[r.id for r in dataset.rows], dtype=object)


def profile_columns(dataset: Dataset, config: ColumnProfileConfig | None = None) -> Dict[str, ColumnProfile]:
    """
    Profile every column of a dataset.

    Missing means null or empty string. Unique counts are taken over
    the present values only.

    Args:
        dataset (Dataset): Parsed dataset.
        config (Optional[ColumnProfileConfig]): Profiling configuration.

    Returns:
        Dict[str, ColumnProfile]: Profiles keyed by column name, in header order.
    """
    cfg = config or ColumnProfileConfig()
    df = dataset_to_frame(dataset)
    out: Dict[str, ColumnProfile] = {}

    for col in df.columns:
        series = df[col]
        kinds = series.map(cell_kind)
        present = series[kinds.notna()]

        prof = ColumnProfile(name=col, count=len(series))
        prof.missing = int(kinds.isna().sum())
        # bool/int equality would merge True with 1, so count distinct typed values
        prof.unique = len({(type(v).__name__, v) for v in present.tolist()})
        prof.kinds = Counter(kinds.value_counts().to_dict())
        prof.samples = [stringify_cell(v) for v in present.head(cfg.sample_values).tolist()]
        out[col] = prof

    return out


def build_profile_text(profiles: Dict[str, ColumnProfile], config: ColumnProfileConfig | None = None) -> str:
    """
    Render column profiles as the DATA PROFILE section of the analysis prompt.

    Args:
        profiles (Dict[str, ColumnProfile]): Output of `profile_columns`.
        config (Optional[ColumnProfileConfig]): Profiling configuration.

    Returns:
        str: Multi-line profile text.
    """
    cfg = config or ColumnProfileConfig()
    lines = []
    for prof in list(profiles.values())[: cfg.top_columns]:
        kinds = ", ".join(f"{k}={n}" for k, n in prof.kinds.most_common())
        lines.append(
            f"- {prof.name}: observed={prof.dominant_kind} "
            f"missing={prof.missing}/{prof.count} unique={prof.unique} "
            f"kinds[{kinds}] samples={prof.samples}"
        )
    return "\n".join(lines)
