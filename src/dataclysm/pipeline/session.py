from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from dataclysm.config import EXPORT_FILENAME
from dataclysm.io.csv_codec import export_csv, parse_dataset
from dataclysm.pipeline.collaborators import (
    AnalysisError,
    LLMCall,
    SessionConfig,
    TransformError,
    analyze_dataset,
    apply_all_actions,
    ask_about_dataset,
    clean_data_batch,
    fix_validation_errors,
)
from dataclysm.pipeline.diff import CellChange, diff_rows
from dataclysm.profiling.charts import aggregate_chart
from dataclysm.schema.models import CleaningAction, Dataset, DatasetAnalysis, ValidationResult
from dataclysm.schema.validation import find_schema_mismatches, validate_dataset

STAGES = ("idle", "analyzing", "review", "export")
AGENTS = ("SYSTEM", "STRATEGIST", "EXECUTIONER", "AUDITOR")
LOG_LEVELS = ("info", "warn", "error", "success", "matrix")


@dataclass
class AgentLog:
    timestamp: str
    agent: str
    message: str
    level: str = "info"

    def to_dict(self) -> Dict[str, str]:
        return {
            "timestamp": self.timestamp,
            "agent": self.agent,
            "message": self.message,
            "level": self.level,
        }


@dataclass
class CleaningSession:
    """
    State of one cleaning workflow.

    The session holds the raw upload and the current cleaned snapshot as
    separate Dataset values; every step replaces `cleaned` with a new
    Dataset instead of editing rows in place. Collaborator failures follow
    two rules: a failed analysis returns the session to `idle`, a failed
    transform leaves `cleaned` exactly as it was.
    """

    config: SessionConfig = field(default_factory=SessionConfig)
    llm: Optional[LLMCall] = None

    stage: str = "idle"
    filename: Optional[str] = None
    raw: Dataset = field(default_factory=Dataset)
    cleaned: Dataset = field(default_factory=Dataset)
    analysis: Optional[DatasetAnalysis] = None
    actions: List[CleaningAction] = field(default_factory=list)
    validation: Optional[ValidationResult] = None
    is_processing: bool = False
    logs: List[AgentLog] = field(default_factory=list)
    chat_history: List[Dict[str, str]] = field(default_factory=list)

    # ------------------------------------------------------------
    # logging
    # ------------------------------------------------------------

    def log(self, agent: str, message: str, level: str = "info") -> AgentLog:
        entry = AgentLog(
            timestamp=datetime.now().strftime("%H:%M:%S"),
            agent=agent,
            message=message,
            level=level,
        )
        self.logs.append(entry)
        if self.config.verbose:
            print(f"[{entry.agent}] {entry.message}")
        return entry

    # ------------------------------------------------------------
    # workflow
    # ------------------------------------------------------------

    def reset(self) -> None:
        self.stage = "idle"
        self.filename = None
        self.raw = Dataset()
        self.cleaned = Dataset()
        self.analysis = None
        self.actions = []
        self.validation = None
        self.is_processing = False
        self.logs = []
        self.chat_history = []

    def load(self, text: str, filename: str = "upload.csv") -> bool:
        """
        Parse an uploaded CSV and run the analysis collaborator.

        Returns:
            bool: True when the session reached the review stage, False when
            analysis failed and the session went back to idle.
        """
        self.reset()
        self.stage = "analyzing"
        self.is_processing = True
        self.filename = filename
        self.log("SYSTEM", f"MOUNTING VOLUME: {filename}...")

        dataset = parse_dataset(text)
        self.log("SYSTEM", f"PARSED {len(dataset)} RECORDS.", "matrix")
        self.log("STRATEGIST", "INITIALIZING DEEP SCAN...")

        try:
            analysis = analyze_dataset(dataset, self.config, llm=self.llm)
        except AnalysisError as e:
            self.log("SYSTEM", f"FATAL INGESTION ERROR: {e}", "error")
            self.stage = "idle"
            self.is_processing = False
            return False

        level = "error" if analysis.overall_health_score < 50 else "success"
        self.log("STRATEGIST", f"SCAN COMPLETE. INTEGRITY: {analysis.overall_health_score}%", level)
        for issue in analysis.critical_issues:
            self.log("STRATEGIST", f"THREAT: {issue}", "warn")

        self.raw = dataset
        self.cleaned = dataset
        self.analysis = analysis
        # host-side copies; status changes must not leak into the analysis
        self.actions = [replace(a) for a in analysis.recommended_actions]
        self.stage = "review"
        self.is_processing = False
        return True

    def _require_analysis(self) -> DatasetAnalysis:
        if self.analysis is None:
            raise RuntimeError("No dataset has been analyzed yet.")
        return self.analysis

    def find_action(self, action_id: str) -> CleaningAction:
        for action in self.actions:
            if action.id == action_id:
                return action
        raise KeyError(action_id)

    def execute_action(self, action_id: str) -> bool:
        """
        Apply one recommended action to the cleaned snapshot.

        Returns:
            bool: True on success; False when the transform failed and the
            data was left unchanged.

        Raises:
            KeyError: If no action has this id.
        """
        self._require_analysis()
        action = self.find_action(action_id)

        self.is_processing = True
        action.status = "processing"
        self.log("EXECUTIONER", f"EXECUTING: {action.title}...", "warn")

        try:
            rows = clean_data_batch(self.cleaned.rows, action, self.config, llm=self.llm)
        except TransformError as e:
            action.status = "pending"
            self.is_processing = False
            self.log("EXECUTIONER", f"PROTOCOL FAILED: {e}", "error")
            return False

        self.cleaned = self.cleaned.with_rows(rows)
        action.status = "completed"
        self.is_processing = False
        self.log("EXECUTIONER", "PROTOCOL COMPLETE.", "success")
        return True

    def apply_all(self) -> bool:
        """Run every cleaning operation at once, then re-validate."""
        analysis = self._require_analysis()
        self.is_processing = True
        self.log("SYSTEM", "EXECUTING ALL CLEANING PROTOCOLS...", "matrix")

        try:
            rows = apply_all_actions(self.cleaned.rows, analysis.columns, self.config, llm=self.llm)
        except TransformError as e:
            self.is_processing = False
            self.log("SYSTEM", f"BULK CLEAN FAILED: {e}", "error")
            return False

        self.cleaned = self.cleaned.with_rows(rows)
        self.log("EXECUTIONER", "RECONSTRUCTION COMPLETE.", "success")

        self._revalidate(analysis)
        self.log("AUDITOR", f"POST-CLEAN INTEGRITY: {self.validation.score}%", "matrix")

        for action in self.actions:
            action.status = "completed"
        self.is_processing = False
        return True

    def validate(self) -> ValidationResult:
        """Score the cleaned snapshot against the analysis column types."""
        analysis = self._require_analysis()
        self.log("AUDITOR", "VERIFYING SCHEMA COMPLIANCE...")
        self._revalidate(analysis)
        self.stage = "export"
        return self.validation

    def _revalidate(self, analysis: DatasetAnalysis) -> ValidationResult:
        for problem in find_schema_mismatches(self.cleaned.headers, analysis.columns):
            self.log("AUDITOR", f"SCHEMA MISMATCH: {problem}", "warn")
        self.validation = validate_dataset(self.cleaned.rows, analysis.columns)
        return self.validation

    def auto_repair(self) -> bool:
        """
        Ask the model to fix the errors of the last validation run.

        Does nothing unless the last validation reported errors. On success
        the repaired rows are validated again from scratch.
        """
        analysis = self._require_analysis()
        if self.validation is None or not self.validation.errors:
            return False

        self.is_processing = True
        self.log("AUDITOR", "INITIATING AUTO-REPAIR...", "warn")

        try:
            rows = fix_validation_errors(self.cleaned.rows, self.validation.errors, self.config, llm=self.llm)
        except TransformError as e:
            self.is_processing = False
            self.log("AUDITOR", f"REPAIR FAILED: {e}", "error")
            return False

        self.cleaned = self.cleaned.with_rows(rows)
        self._revalidate(analysis)
        self.is_processing = False
        self.log("AUDITOR", f"REPAIR COMPLETE. SCORE: {self.validation.score}%", "success")
        return True

    def export(self) -> Tuple[str, str]:
        self.log("SYSTEM", "WRITING EXPORT ARTIFACT...", "success")
        return EXPORT_FILENAME, export_csv(self.cleaned.rows)

    # ------------------------------------------------------------
    # read-only views
    # ------------------------------------------------------------

    def diff(self) -> List[CellChange]:
        return diff_rows(self.raw.rows, self.cleaned.rows)

    def chart(self, x_column: str, y_column: str, aggregation: str = "sum", *, use_raw: bool = False):
        source = self.raw if use_raw else self.cleaned
        return aggregate_chart(source.rows, x_column, y_column, aggregation)

    def summary(self) -> Dict[str, Any]:
        """Compact description of the session used as chat context."""
        return {
            "filename": self.filename,
            "stage": self.stage,
            "rows": len(self.cleaned),
            "headers": list(self.cleaned.headers),
            "healthScore": self.analysis.overall_health_score if self.analysis else None,
            "columns": [c.to_dict() for c in self.analysis.columns] if self.analysis else [],
            "actions": [a.to_dict() for a in self.actions],
            "validation": self.validation.to_dict() if self.validation else None,
        }

    def chat(self, question: str) -> str:
        reply = ask_about_dataset(question, self.summary(), self.chat_history, self.config, llm=self.llm)
        self.chat_history.append({"role": "user", "text": question})
        self.chat_history.append({"role": "model", "text": reply})
        return reply

    def to_dict(self, *, include_rows: bool = True) -> Dict[str, Any]:
        out = {
            "stage": self.stage,
            "filename": self.filename,
            "isProcessing": self.is_processing,
            "headers": list(self.cleaned.headers),
            "rowCount": len(self.cleaned),
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "actions": [a.to_dict() for a in self.actions],
            "validationResult": self.validation.to_dict() if self.validation else None,
            "agentLogs": [entry.to_dict() for entry in self.logs],
        }
        if include_rows:
            out["rawData"] = self.raw.to_records()
            out["cleanedData"] = self.cleaned.to_records()
        return out
