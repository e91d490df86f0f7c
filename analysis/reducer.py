"""
Resume projection for prompt construction.

Strips a full resume record down to the fields an ATS review needs. Identifiers,
timestamps, contact details and ownership data are dropped, and long work
descriptions are truncated to keep the prompt small.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import InputError

DESCRIPTION_MAX_CHARS = 1000


@dataclass(frozen=True)
class PersonalProjection:
    summary: Optional[str] = None
    location: Optional[str] = None


@dataclass(frozen=True)
class ExperienceProjection:
    role: Optional[str]
    company: Optional[str]
    description: Optional[str]
    is_current: bool = False


@dataclass(frozen=True)
class EducationProjection:
    degree: Optional[str]
    school: Optional[str]


@dataclass(frozen=True)
class ResumeProjection:
    """
    Token-efficient view of a resume sent to the generation backend.
    """

    personal: PersonalProjection = field(default_factory=PersonalProjection)
    experience: List[ExperienceProjection] = field(default_factory=list)
    education: List[EducationProjection] = field(default_factory=list)
    skills: List[str] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    certifications: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _entries(record: Dict[str, Any], key: str) -> Iterable[Dict[str, Any]]:
    # Missing and null collections both read as empty
    return record.get(key) or []


def _truncate(text: Optional[str], limit: int = DESCRIPTION_MAX_CHARS) -> Optional[str]:
    if text is None:
        return None
    return text[:limit]


def _names(record: Dict[str, Any], key: str) -> List[str]:
    return [entry.get('name') for entry in _entries(record, key)]


def reduce_resume(resume: Optional[Dict[str, Any]]) -> ResumeProjection:
    """
    Build the ResumeProjection for a full resume record.

    Args:
        resume: Resume record as produced by ResumeService.get_resume_with_all_data.
            Nested collections may be missing or None.

    Returns:
        ResumeProjection

    Raises:
        InputError: If no resume record was supplied or it is malformed
    """
    if resume is None:
        raise InputError("No resume data provided")
    if not isinstance(resume, dict):
        raise InputError(f"Resume record must be a mapping, got {type(resume).__name__}")

    try:
        return _project(resume)
    except (AttributeError, TypeError) as exc:
        raise InputError(f"Malformed resume record: {exc}") from exc


def _project(resume: Dict[str, Any]) -> ResumeProjection:
    personal_info = resume.get('personal_info') or {}

    return ResumeProjection(
        personal=PersonalProjection(
            summary=personal_info.get('summary'),
            location=personal_info.get('location'),
        ),
        experience=[
            ExperienceProjection(
                role=entry.get('job_title'),
                company=entry.get('company'),
                description=_truncate(entry.get('description')),
                is_current=bool(entry.get('is_current')),
            )
            for entry in _entries(resume, 'work_experience')
        ],
        education=[
            EducationProjection(
                degree=entry.get('degree'),
                school=entry.get('school'),
            )
            for entry in _entries(resume, 'education')
        ],
        skills=_names(resume, 'skills'),
        languages=_names(resume, 'languages'),
        certifications=_names(resume, 'certifications'),
    )
