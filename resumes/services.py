"""
Resume Service Layer
Handles validation and business logic for resumes and their sections.
"""
import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from functools import partial
from typing import Callable, Dict, List, Optional

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import connection, models
from django.utils import timezone

from .models import SECTION_MODELS, PersonalInfo, Resume
from .serializers import (
    PersonalInfoSerializer,
    ResumeDetailSerializer,
    SECTION_SERIALIZERS,
)

logger = logging.getLogger(__name__)


class ResumeLimitError(Exception):
    """
    Raised when a user tries to own more resumes than allowed.
    """


class SectionError(Exception):
    """
    Unknown section name or a section entry that does not belong to the resume.
    """


class EntryNotFound(SectionError):
    pass


DATE_SORTED_SECTIONS = ('work_experience', 'education', 'extra_curricular')


def run_best_effort(
    tasks: Dict[str, Callable[[], object]],
    *,
    parallel: bool = True,
    max_workers: Optional[int] = None,
) -> Dict[str, bool]:
    """
    Run independent tasks together and wait for all of them.

    A failing task is logged and reported as ``False``; it never stops the
    others and nothing is rolled back.

    Args:
        tasks: Mapping of task name to a zero-argument callable.
        parallel: Run the tasks in a thread pool instead of one after another.
        max_workers: Thread pool size (defaults to one thread per task).

    Returns:
        Mapping of task name to whether it completed.
    """
    results: Dict[str, bool] = {}
    if not tasks:
        return results

    if not parallel:
        for name, task in tasks.items():
            results[name] = _run_task(name, task)
        return results

    with ThreadPoolExecutor(max_workers=max_workers or len(tasks)) as executor:
        futures = {
            executor.submit(_run_threaded_task, name, task): name
            for name, task in tasks.items()
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    return results


def _run_task(name: str, task: Callable[[], object]) -> bool:
    try:
        task()
        return True
    except Exception:  # noqa: BLE001
        logger.exception("Task '%s' failed; continuing with remaining tasks.", name)
        return False


def _run_threaded_task(name: str, task: Callable[[], object]) -> bool:
    try:
        return _run_task(name, task)
    finally:
        # Worker threads get their own DB connection; don't leak it
        connection.close()


TRUE_STRINGS = ('true', 'on', '1', 'yes')


def plain_data(data) -> Dict:
    """Flatten a QueryDict (form or multipart body) to single values."""
    if hasattr(data, 'dict'):
        return data.dict()
    return dict(data or {})


def is_truthy(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def clean_section_data(model, data: Dict) -> Dict:
    """
    Normalize form input for a section model.

    Empty date strings become None, and ``end_date`` is cleared for entries
    marked as current.
    """
    cleaned = plain_data(data)
    for field in model._meta.concrete_fields:
        if isinstance(field, models.DateField) and cleaned.get(field.name) == '':
            cleaned[field.name] = None

    if 'is_current' in cleaned:
        cleaned['is_current'] = is_truthy(cleaned['is_current'])

    if cleaned.get('is_current') and 'end_date' in {f.name for f in model._meta.concrete_fields}:
        cleaned['end_date'] = None

    return cleaned


def sort_by_date(entries: List[Dict]) -> List[Dict]:
    """
    Current entries first, then by start_date newest to oldest.

    Entries without a start date sort last.
    """
    by_start = sorted(entries, key=lambda entry: entry.get('start_date') or '', reverse=True)
    return sorted(by_start, key=lambda entry: not entry.get('is_current'))


class ResumeService:
    """Service for managing resumes and their sections."""

    @staticmethod
    def resume_limit() -> int:
        return getattr(settings, 'RESUME_LIMIT', 7)

    @staticmethod
    def ensure_capacity(user) -> None:
        """
        Raises:
            ResumeLimitError: If the user already owns the maximum number of resumes
        """
        limit = ResumeService.resume_limit()
        if Resume.objects.filter(user=user).count() >= limit:
            raise ResumeLimitError(
                f"You have reached the maximum limit of {limit} resumes. "
                "Please delete an existing resume to create a new one."
            )

    @staticmethod
    def create_resume(user, title: str) -> Resume:
        """
        Create an empty resume for a user.

        Raises:
            ValidationError: If the title is blank
            ResumeLimitError: If the user is at the resume limit
        """
        title = (title or '').strip()
        if not title:
            raise ValidationError("Title is required.")

        ResumeService.ensure_capacity(user)
        resume = Resume.objects.create(user=user, title=title)
        logger.info("Created resume %s for user %s", resume.pk, user.pk)
        return resume

    @staticmethod
    def rename_resume(resume: Resume, title: str) -> Resume:
        title = (title or '').strip()
        if not title:
            raise ValidationError("Title is required.")
        resume.title = title
        resume.save(update_fields=['title', 'updated_at'])
        return resume

    @staticmethod
    def delete_resume(resume: Resume) -> None:
        resume_id = resume.pk
        resume.delete()
        logger.info("Deleted resume %s", resume_id)

    @staticmethod
    def get_resume_with_all_data(resume_id, user=None) -> Optional[Dict]:
        """
        Fetch a resume with every related section as a plain dictionary.

        Args:
            resume_id: Primary key of the resume
            user: Optional owner to scope the lookup

        Returns:
            Full resume record, or None if it does not exist
        """
        queryset = Resume.objects.select_related('personal_info').prefetch_related(
            *SECTION_MODELS.keys()
        )
        if user is not None:
            queryset = queryset.filter(user=user)

        resume = queryset.filter(pk=resume_id).first()
        if resume is None:
            logger.info("Resume %s not found", resume_id)
            return None

        data = ResumeDetailSerializer(resume).data
        for section in DATE_SORTED_SECTIONS:
            data[section] = sort_by_date(list(data.get(section) or []))
        return data

    # ------------------------------------------------------------------ #
    # Sections                                                           #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _section(section: str):
        if section not in SECTION_MODELS:
            raise SectionError(
                f"Unknown section '{section}'. "
                f"Expected one of: {', '.join(SECTION_MODELS)}"
            )
        return SECTION_MODELS[section], SECTION_SERIALIZERS[section]

    @staticmethod
    def _touch(resume: Resume) -> None:
        Resume.objects.filter(pk=resume.pk).update(updated_at=timezone.now())

    @staticmethod
    def save_personal_info(resume: Resume, data: Dict) -> PersonalInfo:
        """
        Create or update the personal info row for a resume.

        Raises:
            ValidationError: If the data does not validate
        """
        serializer = PersonalInfoSerializer(data=plain_data(data), partial=True)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)

        info, created = PersonalInfo.objects.update_or_create(
            resume=resume,
            defaults=serializer.validated_data,
        )
        ResumeService._touch(resume)
        logger.debug("%s personal info for resume %s", "Created" if created else "Updated", resume.pk)
        return info

    @staticmethod
    def _prepare_entry(section: str, model, data: Dict) -> Optional[Dict]:
        cleaned = clean_section_data(model, data)
        if section in ('skills', 'languages'):
            name = (cleaned.get('name') or '').strip()
            if not name:
                return None
            cleaned['name'] = name
        if section == 'languages' and not cleaned.get('proficiency'):
            cleaned['proficiency'] = 'Native'
        return cleaned

    @staticmethod
    def add_section_entry(resume: Resume, section: str, data: Dict):
        """
        Add one entry to a section.

        Returns:
            The created entry, or None when a blank skill/language name was submitted

        Raises:
            SectionError: If the section is unknown
            ValidationError: If the data does not validate
        """
        model, serializer_class = ResumeService._section(section)
        cleaned = ResumeService._prepare_entry(section, model, data)
        if cleaned is None:
            logger.debug("Ignoring blank %s entry for resume %s", section, resume.pk)
            return None

        serializer = serializer_class(data=cleaned)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)

        entry = serializer.save(resume=resume)
        ResumeService._touch(resume)
        return entry

    @staticmethod
    def edit_section_entry(resume: Resume, section: str, entry_id, data: Dict):
        """
        Partially update one entry of a section.

        Raises:
            SectionError: If the section is unknown
            EntryNotFound: If the entry does not belong to the resume
            ValidationError: If the data does not validate
        """
        model, serializer_class = ResumeService._section(section)
        try:
            instance = model.objects.get(pk=entry_id, resume=resume)
        except model.DoesNotExist:
            raise EntryNotFound(f"{section} entry {entry_id} not found")

        cleaned = clean_section_data(model, data)
        if 'name' in cleaned and isinstance(cleaned['name'], str):
            cleaned['name'] = cleaned['name'].strip()

        serializer = serializer_class(instance, data=cleaned, partial=True)
        if not serializer.is_valid():
            raise ValidationError(serializer.errors)

        entry = serializer.save()
        ResumeService._touch(resume)
        return entry

    @staticmethod
    def delete_section_entry(resume: Resume, section: str, entry_id) -> bool:
        """
        Delete one entry of a section.

        Returns:
            True if deleted, False if not found
        """
        model, _ = ResumeService._section(section)
        deleted, _ = model.objects.filter(pk=entry_id, resume=resume).delete()
        if deleted:
            ResumeService._touch(resume)
        return bool(deleted)

    # ------------------------------------------------------------------ #
    # Duplication                                                        #
    # ------------------------------------------------------------------ #

    @staticmethod
    def duplicate_resume(resume: Resume, user) -> Resume:
        """
        Copy a resume and all of its sections.

        The parent row is created first; each section table is then copied as
        an independent task. A failed section copy is logged and leaves the
        rest of the copy in place.

        Raises:
            ResumeLimitError: If the user is at the resume limit
        """
        ResumeService.ensure_capacity(user)

        copy = Resume.objects.create(
            user=user,
            title=f"{resume.title} (Copy)",
            template_style=resume.template_style,
        )

        tasks = {'personal_info': partial(_copy_personal_info, resume.pk, copy.pk)}
        for section, model in SECTION_MODELS.items():
            tasks[section] = partial(_copy_section_rows, model, resume.pk, copy.pk)

        outcome = run_best_effort(
            tasks,
            parallel=getattr(settings, 'RESUME_COPY_PARALLEL', True),
        )
        failed = sorted(name for name, ok in outcome.items() if not ok)
        if failed:
            logger.warning(
                "Resume %s duplicated as %s with incomplete sections: %s",
                resume.pk,
                copy.pk,
                ", ".join(failed),
            )
        else:
            logger.info("Resume %s duplicated as %s", resume.pk, copy.pk)

        return copy


def _copy_personal_info(source_id, target_id) -> int:
    fields = [
        f.name for f in PersonalInfo._meta.concrete_fields
        if not f.primary_key and f.name != 'resume'
    ]
    row = PersonalInfo.objects.filter(resume_id=source_id).values(*fields).first()
    if row is None:
        return 0
    PersonalInfo.objects.create(resume_id=target_id, **row)
    return 1


def _copy_section_rows(model, source_id, target_id) -> int:
    fields = model.copyable_fields()
    rows = model.objects.filter(resume_id=source_id).order_by('pk').values(*fields)
    copies = [model(resume_id=target_id, **row) for row in rows]
    model.objects.bulk_create(copies)
    return len(copies)
