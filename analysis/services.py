"""
Analysis app services

Runs the ATS analysis pipeline and keeps a bounded per-resume history:
- Reduce the resume record to a ResumeProjection
- Compile the system instruction and user message
- Call the generation backend with the caller's credential
- Store the result, evicting older rows beyond MAX_ANALYSES_PER_RESUME

The history trim and the insert are separate statements without a lock, so
two analyses finishing together for the same resume can leave more than
MAX_ANALYSES_PER_RESUME rows until the next save trims them again.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from django.db import DatabaseError

from .client import AnalysisClient
from .exceptions import PersistenceError
from .models import AnalysisResult
from .prompts import compile_prompt, has_job_description
from .reducer import reduce_resume

logger = logging.getLogger(__name__)

MAX_ANALYSES_PER_RESUME = 3
JOB_TITLE_MAX_LENGTH = 30
DEFAULT_JOB_TITLE = "General Analysis"


def derive_job_title(job_description: Optional[str]) -> str:
    """
    Label for a stored analysis: the first line of the job description cut to
    30 characters, or "General Analysis" when that line is blank. Only line
    feeds end a line.
    """
    title = (job_description or "").split("\n", 1)[0][:JOB_TITLE_MAX_LENGTH]
    return title if title.strip() else DEFAULT_JOB_TITLE


def _existing_analysis_ids(resume_id) -> List[int]:
    return list(
        AnalysisResult.objects.filter(resume_id=resume_id)
        .order_by("-created_at", "-id")
        .values_list("id", flat=True)
    )


def _evict_old_analyses(resume_id) -> int:
    """
    Delete all but the newest MAX_ANALYSES_PER_RESUME - 1 rows when the
    resume is at capacity. Best effort: store errors are logged and swallowed.
    """
    try:
        existing_ids = _existing_analysis_ids(resume_id)
        if len(existing_ids) < MAX_ANALYSES_PER_RESUME:
            return 0

        stale_ids = existing_ids[MAX_ANALYSES_PER_RESUME - 1:]
        deleted, _ = AnalysisResult.objects.filter(id__in=stale_ids).delete()
        logger.info("Evicted %s old analyses for resume %s", deleted, resume_id)
        return deleted
    except DatabaseError:
        logger.exception("Failed to trim analysis history for resume %s; saving anyway.", resume_id)
        return 0


def save_analysis(resume_id, job_description: Optional[str], analysis_text: str) -> AnalysisResult:
    """
    Store a new analysis, keeping at most MAX_ANALYSES_PER_RESUME per resume.

    Args:
        resume_id: Owning resume.
        job_description: Verbatim job description ("" for a general audit).
        analysis_text: Raw text returned by the generation backend.

    Returns:
        The inserted AnalysisResult

    Raises:
        PersistenceError: If the insert fails
    """
    _evict_old_analyses(resume_id)

    if not has_job_description(job_description):
        job_description = ""
    try:
        record = AnalysisResult.objects.create(
            resume_id=resume_id,
            job_description=job_description,
            analysis_result=analysis_text,
            job_title=derive_job_title(job_description),
        )
    except DatabaseError as exc:
        logger.error("Failed to save analysis for resume %s: %s", resume_id, exc)
        raise PersistenceError(f"Failed to save analysis: {exc}") from exc

    logger.info("Saved analysis %s for resume %s", record.pk, resume_id)
    return record


def delete_analysis(analysis_id, *, user=None) -> bool:
    """
    Delete one stored analysis.

    Deleting a row that no longer exists is a no-op.

    Args:
        analysis_id: Primary key of the analysis.
        user: When given, only analyses of this user's resumes are deleted.

    Returns:
        True if a row was deleted, False if there was nothing to delete

    Raises:
        PersistenceError: If the store rejects the delete
    """
    queryset = AnalysisResult.objects.filter(id=analysis_id)
    if user is not None:
        queryset = queryset.filter(resume__user=user)

    try:
        deleted, _ = queryset.delete()
    except DatabaseError as exc:
        logger.error("Failed to delete analysis %s: %s", analysis_id, exc)
        raise PersistenceError(f"Failed to delete analysis: {exc}") from exc

    if not deleted:
        logger.info("Analysis %s already deleted; nothing to do.", analysis_id)
    return bool(deleted)


def get_recent_analyses(resume_id) -> List[AnalysisResult]:
    """
    Stored analyses for a resume, newest first.

    Read errors are logged and produce an empty list.
    """
    try:
        return list(
            AnalysisResult.objects.filter(resume_id=resume_id).order_by("-created_at", "-id")
        )
    except DatabaseError:
        logger.exception("Failed to load analyses for resume %s", resume_id)
        return []


class AnalysisService:
    """
    ATS analysis pipeline for one resume record.
    """

    def __init__(self, client_class=None):
        self.client_class = client_class or AnalysisClient

    def run(
        self,
        resume_record: Optional[Dict[str, Any]],
        job_description: Optional[str],
        api_key: Optional[str],
    ) -> str:
        """
        Reduce, compile and call the generation backend.

        Returns:
            Raw analysis text (or the fallback text when the backend returned nothing)

        Raises:
            InputError: If the resume record is missing or malformed
            AuthError: If the credential is missing or rejected
            ServiceUnavailable: If the backend fails for other reasons
        """
        projection = reduce_resume(resume_record)
        prompt = compile_prompt(projection, job_description)
        client = self.client_class(api_key)
        return client.analyze(prompt.system_instruction, prompt.user_message)

    def analyze_and_save(
        self,
        resume_record: Optional[Dict[str, Any]],
        job_description: Optional[str],
        api_key: Optional[str],
    ) -> AnalysisResult:
        """
        Run the pipeline and store the result in the resume's history.

        Raises:
            Everything run() raises, plus PersistenceError
        """
        text = self.run(resume_record, job_description, api_key)
        return save_analysis(resume_record["id"], job_description or "", text)
