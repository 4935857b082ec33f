from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from dataclysm import config as settings
from dataclysm.llm import (
    build_analysis_prompt,
    build_apply_all_prompt,
    build_chat_prompt,
    build_cleaning_prompt,
    build_repair_prompt,
    call_gemini_api,
    extract_json,
)
from dataclysm.profiling import build_profile_text, profile_columns
from dataclysm.schema.models import (
    CleaningAction,
    ColumnStats,
    Dataset,
    DatasetAnalysis,
    Row,
    ValidationError,
    conform_rows,
    row_from_dict,
)

LLMCall = Callable[..., Optional[str]]

CHAT_FALLBACK = "I could not reach the analysis service. Please try again."


class DataclysmError(Exception):
    """Base class for pipeline failures."""


class AnalysisError(DataclysmError):
    """The analysis collaborator produced no usable answer."""


class TransformError(DataclysmError):
    """A cleaning or repair call produced no usable rows."""


@dataclass
class SessionConfig:
    """
    Configuration container for LLM-backed pipeline steps.

    This dataclass defines the model settings, sampling parameters and
    logging behavior shared by the analysis and transform collaborators.
    """

    # LLM
    gemini_model: str = settings.GEMINI_MODEL
    response_mime_type: str = settings.RESPONSE_MIME_TYPE

    # analysis sampling
    analysis_sample_rows: int = settings.ANALYSIS_SAMPLE_ROWS

    # logging
    verbose: bool = settings.VERBOSE


def _p(verbose: bool, *args, **kwargs):
    if verbose:
        print(*args, **kwargs)


def _ask(llm: Optional[LLMCall], prompt: str, cfg: SessionConfig) -> Optional[str]:
    call = llm or call_gemini_api
    return call(
        prompt,
        model_name=cfg.gemini_model,
        response_mime_type=cfg.response_mime_type,
        verbose=cfg.verbose,
    )


# ============================================================
# Analysis
# ============================================================

def analyze_dataset(
    dataset: Dataset,
    config: Optional[SessionConfig] = None,
    *,
    llm: Optional[LLMCall] = None,
) -> DatasetAnalysis:
    """
    Ask the model for column types, quality issues and cleaning actions.

    Only the first `analysis_sample_rows` rows are sent, together with a
    locally computed profile of the full dataset.

    Args:
        dataset (Dataset): Parsed dataset.
        config (Optional[SessionConfig]): Pipeline configuration.
        llm (Optional[LLMCall]): Replacement for `call_gemini_api`.

    Returns:
        DatasetAnalysis: Parsed analysis; every action is pending.

    Raises:
        AnalysisError: If the call fails or the reply is not a JSON object.
    """
    cfg = config or SessionConfig()

    sample = [r.to_dict() for r in dataset.rows[: cfg.analysis_sample_rows]]
    profile_text = build_profile_text(profile_columns(dataset))
    prompt = build_analysis_prompt(dataset.headers, sample, profile_text)

    _p(cfg.verbose, f"--- Asking Gemini for analysis: {cfg.gemini_model} ---")
    payload = extract_json(_ask(llm, prompt, cfg))
    if not isinstance(payload, dict):
        raise AnalysisError("Failed to analyze dataset.")

    analysis = DatasetAnalysis.from_dict(payload)
    if not analysis.row_count:
        analysis.row_count = len(dataset)
    if not analysis.column_count:
        analysis.column_count = len(dataset.headers)
    return analysis


# ============================================================
# Transforms
# ============================================================

def rows_from_payload(payload: Any, source: Sequence[Row]) -> List[Row]:
    """
    Convert a model-returned JSON array into rows.

    Ids are taken from the input row at the same position; beyond the
    input length a synthetic `row-<millis>-<idx>` id is used. All rows are
    conformed to the columns of the first returned row.

    Raises:
        TransformError: If the payload is not a list of objects.
    """
    if not isinstance(payload, list):
        raise TransformError("Model did not return a JSON array of rows.")

    stamp = int(time.time() * 1000)
    rows: List[Row] = []
    for idx, item in enumerate(payload):
        if not isinstance(item, dict):
            raise TransformError(f"Row {idx} is not a JSON object.")
        fallback = f"row-{stamp}-{idx}"
        row = row_from_dict(item, fallback_id=fallback)
        row.id = source[idx].id if idx < len(source) else fallback
        rows.append(row)

    if not rows:
        return rows
    return conform_rows(rows, list(rows[0].cells.keys()))


def _transform(prompt: str, rows: Sequence[Row], cfg: SessionConfig, llm: Optional[LLMCall], what: str) -> List[Row]:
    _p(cfg.verbose, f"--- Asking Gemini to {what}: {len(rows)} rows ---")
    raw = _ask(llm, prompt, cfg)
    if raw is None:
        raise TransformError(f"No response while trying to {what}.")
    payload = extract_json(raw)
    if payload is None:
        raise TransformError(f"Unparseable response while trying to {what}.")
    return rows_from_payload(payload, rows)


def clean_data_batch(
    rows: Sequence[Row],
    action: CleaningAction,
    config: Optional[SessionConfig] = None,
    *,
    llm: Optional[LLMCall] = None,
) -> List[Row]:
    """Apply one cleaning action to all rows and return replacement rows."""
    cfg = config or SessionConfig()
    prompt = build_cleaning_prompt([r.to_dict() for r in rows], action)
    return _transform(prompt, rows, cfg, llm, f"apply '{action.title}'")


def apply_all_actions(
    rows: Sequence[Row],
    columns: Sequence[ColumnStats],
    config: Optional[SessionConfig] = None,
    *,
    llm: Optional[LLMCall] = None,
) -> List[Row]:
    """Run every cleaning operation in a single call."""
    cfg = config or SessionConfig()
    prompt = build_apply_all_prompt([r.to_dict() for r in rows], columns)
    return _transform(prompt, rows, cfg, llm, "apply all actions")


def fix_validation_errors(
    rows: Sequence[Row],
    errors: Sequence[ValidationError],
    config: Optional[SessionConfig] = None,
    *,
    llm: Optional[LLMCall] = None,
) -> List[Row]:
    """Ask the model to coerce or null out values that failed validation."""
    cfg = config or SessionConfig()
    prompt = build_repair_prompt([r.to_dict() for r in rows], errors)
    return _transform(prompt, rows, cfg, llm, "repair validation errors")


# ============================================================
# Chat
# ============================================================

def ask_about_dataset(
    question: str,
    context: Dict[str, Any],
    history: Optional[List[Dict[str, str]]] = None,
    config: Optional[SessionConfig] = None,
    *,
    llm: Optional[LLMCall] = None,
) -> str:
    """
    Answer a free-text question about the current dataset.

    Returns:
        str: Model reply, or a fixed apology when the call fails.
    """
    cfg = config or SessionConfig()
    prompt = build_chat_prompt(question, context, history or [])

    call = llm or call_gemini_api
    reply = call(prompt, model_name=cfg.gemini_model, response_mime_type="text/plain", verbose=cfg.verbose)
    return reply.strip() if reply else CHAT_FALLBACK
