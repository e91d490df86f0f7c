"""
Frontend views for resumes app.
"""
import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_POST

from accounts.utils import safe_next_url
from analysis.frontend_views import load_recovery_flow
from analysis.services import MAX_ANALYSES_PER_RESUME, get_recent_analyses

from .editing import EditingSession
from .models import SECTION_MODELS, Resume
from .services import ResumeLimitError, ResumeService, SectionError

logger = logging.getLogger(__name__)

SECTION_LABELS = {
    'work_experience': 'Work Experience',
    'education': 'Education',
    'skills': 'Skills',
    'languages': 'Languages',
    'extra_curricular': 'Extra-curricular Activities',
    'certifications': 'Certifications',
    'honors_awards': 'Honors & Awards',
    'resume_references': 'References',
}

# Editor form inputs per section: (field, input type, label)
SECTION_FORM_FIELDS = {
    'work_experience': [
        ('job_title', 'text', 'Job title'),
        ('company', 'text', 'Company'),
        ('location', 'text', 'Location'),
        ('start_date', 'date', 'Start date'),
        ('end_date', 'date', 'End date'),
        ('is_current', 'checkbox', 'I currently work here'),
        ('description', 'textarea', 'Description'),
    ],
    'education': [
        ('school', 'text', 'School'),
        ('degree', 'text', 'Degree'),
        ('field_of_study', 'text', 'Field of study'),
        ('start_date', 'date', 'Start date'),
        ('end_date', 'date', 'End date'),
        ('is_current', 'checkbox', 'Currently studying'),
    ],
    'skills': [('name', 'text', 'Skill')],
    'languages': [('name', 'text', 'Language'), ('proficiency', 'text', 'Proficiency')],
    'extra_curricular': [
        ('title', 'text', 'Title'),
        ('organization', 'text', 'Organization'),
        ('start_date', 'date', 'Start date'),
        ('end_date', 'date', 'End date'),
        ('is_current', 'checkbox', 'Ongoing'),
        ('description', 'textarea', 'Description'),
    ],
    'certifications': [
        ('name', 'text', 'Name'),
        ('issuer', 'text', 'Issuer'),
        ('issue_date', 'date', 'Issue date'),
        ('expiration_date', 'date', 'Expiration date'),
        ('url', 'url', 'URL'),
    ],
    'honors_awards': [
        ('title', 'text', 'Title'),
        ('issuer', 'text', 'Issuer'),
        ('award_date', 'date', 'Date'),
        ('description', 'textarea', 'Description'),
    ],
    'resume_references': [
        ('name', 'text', 'Name'),
        ('position', 'text', 'Position'),
        ('organization', 'text', 'Organization'),
        ('email', 'email', 'Email'),
        ('phone', 'text', 'Phone'),
        ('relationship', 'text', 'Relationship'),
    ],
}


def _form_errors(exc: ValidationError) -> str:
    if hasattr(exc, 'error_dict'):
        return '; '.join(
            f"{field}: {' '.join(errors)}" for field, errors in exc.message_dict.items()
        )
    return ' '.join(exc.messages)


@login_required
@require_POST
def resume_create(request):
    """Create a resume from the dashboard."""
    title = request.POST.get('title', '')
    try:
        resume = ResumeService.create_resume(request.user, title)
    except ResumeLimitError as e:
        messages.error(request, str(e))
        return redirect('dashboard')
    except ValidationError as e:
        messages.error(request, _form_errors(e))
        return redirect('dashboard')

    messages.success(request, f'Resume "{resume.title}" created.')
    return redirect('resume_detail', resume_id=resume.id)


@login_required
def resume_detail(request, resume_id):
    """Resume editor with the analysis panel."""
    record = ResumeService.get_resume_with_all_data(resume_id, user=request.user)
    if record is None:
        raise Http404("Resume not found")

    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    flow = load_recovery_flow(request, resume)

    editing = EditingSession(theme=request.session.get('editor_theme', 'light'))
    editing.mark_saved(resume.updated_at)

    context = {
        'resume': resume,
        'record': record,
        'sections': [
            {
                'name': name,
                'label': SECTION_LABELS[name],
                'entries': record.get(name) or [],
                'form_fields': SECTION_FORM_FIELDS[name],
            }
            for name in SECTION_MODELS
        ],
        'template_styles': Resume.TemplateStyle.choices,
        'analyses': get_recent_analyses(resume.pk),
        'max_analyses': MAX_ANALYSES_PER_RESUME,
        'recovery': flow,
        'save_status': editing.save_status(),
        'theme': editing.get('theme'),
        'autosave_delay_ms': int(getattr(settings, 'AUTOSAVE_QUIET_PERIOD_SECONDS', 2.0) * 1000),
    }
    return render(request, 'resumes/detail.html', context)


@login_required
@require_POST
def resume_rename(request, resume_id):
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    try:
        ResumeService.rename_resume(resume, request.POST.get('title', ''))
        messages.success(request, 'Resume renamed.')
    except ValidationError as e:
        messages.error(request, _form_errors(e))
    return redirect(safe_next_url(request))


@login_required
@require_POST
def resume_duplicate(request, resume_id):
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    try:
        copy = ResumeService.duplicate_resume(resume, request.user)
    except ResumeLimitError as e:
        messages.error(request, str(e))
        return redirect('dashboard')

    messages.success(request, f'Created "{copy.title}".')
    return redirect('dashboard')


@login_required
@require_POST
def resume_delete(request, resume_id):
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    title = resume.title
    ResumeService.delete_resume(resume)
    messages.success(request, f'Resume "{title}" deleted.')
    return redirect('dashboard')


@login_required
@require_POST
def resume_personal_info(request, resume_id):
    """Save the personal info block of the editor."""
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    fields = ('full_name', 'email', 'phone', 'location', 'summary')
    data = {field: request.POST.get(field, '') for field in fields if field in request.POST}

    try:
        ResumeService.save_personal_info(resume, data)
        messages.success(request, 'Personal info saved.')
    except ValidationError as e:
        messages.error(request, _form_errors(e))
    return redirect('resume_detail', resume_id=resume.id)


@login_required
@require_POST
def resume_section_add(request, resume_id, section):
    """Add one entry to a section from the editor form."""
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    data = request.POST.dict()
    data.pop('csrfmiddlewaretoken', None)

    try:
        entry = ResumeService.add_section_entry(resume, section, data)
    except SectionError:
        raise Http404("Unknown section")
    except ValidationError as e:
        messages.error(request, _form_errors(e))
        return redirect('resume_detail', resume_id=resume.id)

    if entry is not None:
        messages.success(request, f'{SECTION_LABELS[section]} updated.')
    return redirect('resume_detail', resume_id=resume.id)


@login_required
@require_POST
def resume_section_delete(request, resume_id, section, entry_id):
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    try:
        deleted = ResumeService.delete_section_entry(resume, section, entry_id)
    except SectionError:
        raise Http404("Unknown section")

    if deleted:
        messages.success(request, 'Entry removed.')
    return redirect('resume_detail', resume_id=resume.id)


@login_required
@require_POST
def editor_theme(request):
    """Toggle the editor between light and dark themes."""
    theme = request.POST.get('theme')
    request.session['editor_theme'] = 'dark' if theme == 'dark' else 'light'
    return redirect(safe_next_url(request))
