import json
from typing import Any, Dict, List, Sequence

from dataclysm.schema.models import CleaningAction, ColumnStats, ValidationError


def _rows_json(rows: Sequence[Dict[str, Any]]) -> str:
    return json.dumps(list(rows), default=str)


def build_analysis_prompt(headers: Sequence[str], sample_rows: Sequence[Dict[str, Any]], profile_text: str) -> str:
    return f"""
    You are an expert Data Scientist. Analyze the following dataset snippet (JSON format).

    Identify:
    1. Data types for each column (one of: string, number, boolean, date, mixed).
    2. Missing value counts (approximate based on sample).
    3. Quality issues (inconsistent formatting, outliers, typos, mixed types).
    4. An overall health score (0-100).
    5. A list of recommended automated cleaning actions.

    Allowed action types: impute, remove_duplicates, standardize_format, remove_outliers, fix_typos.
    Allowed impact values: high, medium, low.

    DATA PROFILE:
    {profile_text}

    Dataset Headers: {", ".join(headers)}
    Dataset Sample: {_rows_json(sample_rows)}

    OUTPUT JSON FORMAT:
    {{
      "rowCount": 0,
      "columnCount": 0,
      "overallHealthScore": 0,
      "columns": [
        {{
          "name": "columnName",
          "type": "string|number|boolean|date|mixed",
          "missingCount": 0,
          "uniqueCount": 0,
          "issues": ["..."],
          "sampleValues": ["..."]
        }}
      ],
      "criticalIssues": ["..."],
      "recommendedActions": [
        {{
          "id": "action-1",
          "type": "impute|remove_duplicates|standardize_format|remove_outliers|fix_typos",
          "title": "...",
          "description": "...",
          "impact": "high|medium|low",
          "columnTarget": "columnName or null"
        }}
      ]
    }}
    """


def build_cleaning_prompt(rows: Sequence[Dict[str, Any]], action: CleaningAction) -> str:
    return f"""
    Perform the following data cleaning action on the provided JSON dataset:
    Action: {action.title} ({action.type})
    Description: {action.description}
    Target Column: {action.column_target or "Global"}

    Rules:
    - Return ONLY the cleaned JSON array.
    - Keep the "id" of every row you return.
    - Do not change structure or keys unless specified.
    - If filling missing values, use statistical inference (median/mode) or context.
    - If fixing typos, use closest logical match.

    Dataset:
    {_rows_json(rows)}
    """


def build_apply_all_prompt(rows: Sequence[Dict[str, Any]], columns: Sequence[ColumnStats]) -> str:
    schema_lines = "\n".join(f'    - "{c.name}": {c.type}' for c in columns)
    return f"""
    Clean the provided JSON dataset completely in a single pass.
    Apply every applicable operation: impute missing values, remove duplicate rows,
    standardize formats, remove outliers and fix typos.

    Target column types:
{schema_lines}

    Rules:
    - Return ONLY the cleaned JSON array.
    - Keep the "id" of every row you return.
    - Coerce values to the target column type where possible.
    - If a value cannot be reconciled with its column type, set it to null and record
      the reason in a "_flags" object on that row, keyed by column name.

    Dataset:
    {_rows_json(rows)}
    """


def build_repair_prompt(rows: Sequence[Dict[str, Any]], errors: Sequence[ValidationError]) -> str:
    instructions = "\n".join(
        f'    - Column "{e.column}" expects type "{e.expected_type}". Fix values like: {json.dumps(e.examples)}.'
        for e in errors
    )
    return f"""
    The following dataset has failed schema validation. Please repair the data automatically.

    Specific Errors to Fix:
{instructions}

    General Rules:
    1. Attempt to coerce types (e.g. string "100" -> number 100).
    2. If a value is completely invalid for the target type (e.g. "N/A" in a number column),
       replace it with null and explain why in a "_flags" object on that row, keyed by column name.
    3. Return ONLY the corrected JSON array.
    4. Preserve all other columns, the "id" of every row, and data exactly.

    Dataset:
    {_rows_json(rows)}
    """


def build_chat_prompt(question: str, context: Dict[str, Any], history: List[Dict[str, str]]) -> str:
    transcript = "\n".join(f"    {m['role'].upper()}: {m['text']}" for m in history)
    return f"""
    You are the assistant of a data cleaning tool. Answer questions about the
    user's dataset using only the context below. Be concise.

    CONTEXT:
    {json.dumps(context, default=str)}

    CONVERSATION:
{transcript}

    USER: {question}
    """
