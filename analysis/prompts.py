"""
Prompt construction for ATS analysis.

The system instruction pins the output to a small HTML fragment with three
fixed sections and a capped-deduction scoring rubric. Keyword suggestions are
restricted to terms that appear in the supplied job description.
"""
from __future__ import annotations

import json
from typing import NamedTuple, Optional

from .exceptions import InputError
from .reducer import ResumeProjection

ALLOWED_TAGS = ("h4", "p", "ul", "li", "strong")

SCORE_HEADING = "ATS Score"
FIXES_HEADING = "Critical Fixes"
MISSING_KEYWORDS_HEADING = "Missing Keywords"
KEYWORD_GAPS_HEADING = "Keyword Gaps"

RESUME_LABEL = "RESUME DATA:"
JOB_DESCRIPTION_LABEL = "TARGET JOB DESCRIPTION:"


class CompiledPrompt(NamedTuple):
    system_instruction: str
    user_message: str


def has_job_description(job_description: Optional[str]) -> bool:
    return bool(job_description and job_description.strip())


def keywords_heading(job_description: Optional[str]) -> str:
    if has_job_description(job_description):
        return MISSING_KEYWORDS_HEADING
    return KEYWORD_GAPS_HEADING


def _task_block(with_jd: bool) -> str:
    if with_jd:
        return "Compare the resume JSON against the provided Job Description."
    return "Audit the resume for general ATS best practices and impact."


def _keyword_rules(with_jd: bool) -> str:
    if with_jd:
        return (
            "KEYWORD RULES:\n"
            "- Every keyword you list MUST appear word-for-word in the TARGET JOB DESCRIPTION text.\n"
            "- Before listing a keyword, confirm it is present in that text. If it is not, drop it.\n"
            "- Do NOT infer, generalize, paraphrase, or add synonyms beyond the job description text.\n"
            "- Do NOT list keywords that already appear prominently in the resume."
        )
    return (
        "KEYWORD RULES:\n"
        "- No job description was supplied. List only terms that already appear in the resume\n"
        "  data but are underused or missing from the summary and experience descriptions.\n"
        "- Do NOT invent tools, technologies, or skills that are not in the resume data."
    )


def _rubric(with_jd: bool) -> str:
    keyword_line = (
        "  - Up to 40 points for missing or weak keywords taken ONLY from the job description."
        if with_jd
        else "  - Up to 40 points for weak or underused keywords already present in the resume."
    )
    skills_line = (
        "  - Up to 20 points for skills present in the job description that are missing or underused in the resume."
        if with_jd
        else "  - Up to 20 points for listed skills that are not demonstrated in the experience descriptions."
    )
    return "\n".join(
        [
            "SCORING RUBRIC:",
            "- Start from 100 points and apply only these deductions:",
            keyword_line,
            "  - Up to 30 points for vague or unquantified experience descriptions.",
            skills_line,
            "  - Up to 10 points for a weak summary or unclear role alignment.",
            "- The score is 100 minus the sum of deductions, never below 0.",
        ]
    )


def build_system_instruction(job_description: Optional[str] = None) -> str:
    """
    Build the system instruction for one analysis request.

    The only branch is whether a job description was supplied.
    """
    with_jd = has_job_description(job_description)
    tags = ", ".join(f"<{tag}>" for tag in ALLOWED_TAGS)

    return f"""You are an ATS (Applicant Tracking System) resume analysis expert.

TASK:
{_task_block(with_jd)}

OUTPUT FORMAT RULES:
- Return RAW HTML only.
- Do NOT use Markdown, code blocks, or backticks.
- Do NOT include inline styles, <style>, <script>, or external links.
- Use ONLY these elements: {tags}. No other elements or attributes.
- Do NOT write any text outside the structure below. No greetings, notes, or commentary.

REQUIRED STRUCTURE (follow exactly):

<h4>{SCORE_HEADING}</h4>
<p><strong>{{{{SCORE}}}} / 100</strong> – {{{{1-sentence summary}}}}</p>

<h4>{FIXES_HEADING}</h4>
<ul>
  <li>{{{{3–5 specific, actionable fixes based strictly on the resume content}}}}</li>
</ul>

<h4>{keywords_heading(job_description)}</h4>
<ul>
  <li>{{{{3–5 relevant keywords that are missing or underused}}}}</li>
</ul>

The "{FIXES_HEADING}" and "{keywords_heading(job_description)}" sections MUST be <ul> lists, never paragraphs.

{_rubric(with_jd)}

{_keyword_rules(with_jd)}

FIX RULES:
- Base every fix ONLY on the provided resume data.
- Suggest clarifying, restructuring, or quantifying what the resume already states.
- NEVER suggest inventing or extending experience duration.
- NEVER suggest adding degrees, certifications, or credentials that are not listed.
- NEVER suggest matching the years of experience requested by the job posting.
- If information is missing, say so explicitly instead of guessing.
"""


def build_user_message(projection: ResumeProjection, job_description: Optional[str] = None) -> str:
    resume_context = json.dumps(projection.to_dict(), indent=2, ensure_ascii=False)
    if has_job_description(job_description):
        return f"{RESUME_LABEL}\n{resume_context}\n\n{JOB_DESCRIPTION_LABEL}\n{job_description}"
    return f"{RESUME_LABEL}\n{resume_context}"


def compile_prompt(
    projection: Optional[ResumeProjection],
    job_description: Optional[str] = None,
) -> CompiledPrompt:
    """
    Compile the system instruction and user message for an analysis request.

    Args:
        projection: Reduced resume data.
        job_description: Optional target job description; blank counts as absent.

    Returns:
        CompiledPrompt(system_instruction, user_message)

    Raises:
        InputError: If the projection is missing or not a ResumeProjection
    """
    if not isinstance(projection, ResumeProjection):
        raise InputError("A resume projection is required to build the analysis prompt.")

    return CompiledPrompt(
        system_instruction=build_system_instruction(job_description),
        user_message=build_user_message(projection, job_description),
    )
