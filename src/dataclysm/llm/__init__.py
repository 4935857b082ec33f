"""
Large Language Model (LLM) interface utilities for data cleaning.

This package provides the abstraction layer between the cleaning
pipeline and the underlying LLM backend. It includes helpers for
prompt construction, model invocation, and structured JSON extraction
from model responses.

The public API re-exports a minimal, stable interface for:
- Building analysis, cleaning, repair and chat prompts
- Calling the Gemini LLM API
- Extracting structured JSON outputs
"""
from dataclysm.llm.gemini_client import call_gemini_api, extract_json
from dataclysm.llm.prompts import (
    build_analysis_prompt,
    build_cleaning_prompt,
    build_apply_all_prompt,
    build_repair_prompt,
    build_chat_prompt,
)

__all__ = [
    "call_gemini_api",
    "extract_json",
    "build_analysis_prompt",
    "build_cleaning_prompt",
    "build_apply_all_prompt",
    "build_repair_prompt",
    "build_chat_prompt",
]
