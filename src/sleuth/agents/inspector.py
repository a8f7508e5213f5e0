"""InspectorAgent — runs one inspection request end to end.

raw content → prechecks + fingerprint → cache lookup → reasoning provider →
output parsing → normalized response → cache store.
"""

from __future__ import annotations

import json
import logging
import time

from sleuth.agents.base import BaseAgent
from sleuth.analysis.fingerprint import build_fingerprint
from sleuth.analysis.llm_output import UnparseableOutputError, parse_llm_output
from sleuth.analysis.prechecks import detect_file_type, run_prechecks
from sleuth.analysis.redaction import redact
from sleuth.analysis.responses import build_parse_error_response, build_success_response
from sleuth.cache.result_cache import compute_content_hash
from sleuth.models.fingerprint import SchemaFingerprint
from sleuth.models.requests import AnalyzeRequest
from sleuth.models.responses import ParseErrorResponse, SuccessResponse

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a data-quality inspector. Find syntax, structure, semantic and "
    "validation problems in the user's file. Reply with JSON only: "
    '{"errors": [{"type": ..., "message": ..., "line": ..., "column": ..., '
    '"severity": ..., "explanation": ..., "suggestions": [{"text": ..., "safety": ...}]}]}'
)

TRUNCATION_NOTE = "\n\n...<TRUNCATED: Content omitted>...\n"


class InspectorAgent(BaseAgent):
    """Inspects a single file through the external reasoning provider."""

    def build_messages(
        self,
        content: str,
        file_type: str,
        fingerprint: SchemaFingerprint,
        hints: list[dict],
        max_errors: int,
        truncated: bool,
    ) -> list[dict[str, str]]:
        context = {
            "file_type": file_type,
            "max_errors": max_errors,
            "schema_fingerprint": fingerprint.to_context(),
            "parser_hints": hints,
            "truncated": truncated,
        }
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": f"Context:\n{json.dumps(context)}\n\nFile:\n{content}"},
        ]

    def _cap(self, content: str) -> tuple[str, bool]:
        limit = self._settings.request.max_content_chars
        if len(content) <= limit:
            return content, False
        return content[:limit] + TRUNCATION_NOTE, True

    def analyze(self, request: AnalyzeRequest, request_id: str) -> SuccessResponse | ParseErrorResponse:
        started = time.monotonic()

        def elapsed_ms() -> float:
            return (time.monotonic() - started) * 1000

        file_type = request.file_type
        if file_type == "auto":
            file_type = detect_file_type(request.content)
            logger.info("Detected file type request_id=%s file_type=%s", request_id, file_type)

        content, truncated = self._cap(request.content)
        if truncated:
            logger.info(
                "Content truncated request_id=%s original_length=%d",
                request_id, len(request.content),
            )

        hints = run_prechecks(request.content, file_type)
        fingerprint = build_fingerprint(
            request.content, file_type, self._settings.fingerprint.sample_size,
        )

        cached = self._cache.lookup(request.content, request.max_errors, file_type, request_id)
        if cached is not None:
            return SuccessResponse.model_validate(cached).model_copy(
                update={
                    "request_id": request_id,
                    "cached": True,
                    "analysis_time_ms": round(elapsed_ms()),
                }
            )

        messages = self.build_messages(content, file_type, fingerprint, hints, request.max_errors, truncated)
        reply = self._model.chat(messages)
        raw_output = reply.content

        try:
            raw_errors = parse_llm_output(raw_output)
        except UnparseableOutputError as exc:
            logger.warning(
                "Unparseable provider output request_id=%s output=%s",
                request_id, redact(raw_output, self._settings.redaction.log_max_length),
            )
            return build_parse_error_response(
                request_id=request_id,
                file_type=file_type,
                truncated=truncated,
                analysis_time_ms=elapsed_ms(),
                raw_llm_output=raw_output,
                parser_hints=hints,
                error_message=str(exc),
            )

        response = build_success_response(
            request_id=request_id,
            file_type=file_type,
            errors=raw_errors[:request.max_errors],
            analysis_time_ms=elapsed_ms(),
            truncated=truncated,
            content_hash=compute_content_hash(request.content),
            llm_provider=self._model.name,
            llm_model=self._model.model,
            tokens_used=reply.total_tokens,
            parser_hints=hints or None,
            raw_llm_output=raw_output,
            include_raw_output=self._settings.include_raw_output,
        )
        logger.info(
            "Analysis complete request_id=%s errors=%d warnings=%d time_ms=%d",
            request_id, response.total_errors, response.total_warnings, response.analysis_time_ms,
        )

        # Raw provider output is never persisted.
        stored = response.model_copy(update={"raw_llm_output": None}).to_payload()
        self._cache.store(
            request.content, request.max_errors, file_type, stored, request_id, model=self._model.model,
        )
        return response
