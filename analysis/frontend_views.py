"""
Frontend views for analysis app.

The credential recovery state for each resume lives in the user's session so
the detail page can re-open the modal after a redirect.
"""
import logging

from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.shortcuts import get_object_or_404, redirect
from django.views.decorators.http import require_POST

from accounts.utils import get_api_key, set_api_key
from resumes.models import Resume
from resumes.services import ResumeService

from .exceptions import InputError, PersistenceError, RecoveryStateError
from .recovery import CredentialRecoveryFlow
from .services import AnalysisService, delete_analysis, save_analysis

logger = logging.getLogger(__name__)


def recovery_session_key(resume_id) -> str:
    return f'analysis_recovery_{resume_id}'


def load_recovery_flow(request, resume: Resume) -> CredentialRecoveryFlow:
    """
    Rebuild the recovery flow for ``resume`` from the session.
    """
    service = AnalysisService()

    def analyze(job_description, credential):
        record = ResumeService.get_resume_with_all_data(resume.pk, user=request.user)
        return service.run(record, job_description, credential)

    def on_success(text, job_description):
        return save_analysis(resume.pk, job_description or '', text)

    return CredentialRecoveryFlow.restore(
        request.session.get(recovery_session_key(resume.pk)),
        analyze,
        on_success=on_success,
        credential=get_api_key(request),
    )


def store_recovery_flow(request, resume: Resume, flow: CredentialRecoveryFlow) -> None:
    request.session[recovery_session_key(resume.pk)] = flow.snapshot()


def _report(request, flow: CredentialRecoveryFlow, analysis) -> None:
    if analysis is not None:
        messages.success(request, f'Analysis "{analysis.job_title}" is ready.')
    elif flow.modal_open:
        messages.warning(request, flow.message)


@login_required
@require_POST
def analysis_run(request, resume_id):
    """Run an ATS analysis for a resume, optionally against a job description."""
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    flow = load_recovery_flow(request, resume)
    job_description = request.POST.get('job_description', '')

    try:
        analysis = flow.request_analysis(job_description)
    except RecoveryStateError:
        messages.error(request, 'Finish or dismiss the pending analysis first.')
        return redirect('resume_detail', resume_id=resume.id)
    except InputError as exc:
        messages.error(request, f'Could not analyze this resume: {exc}')
        analysis = None
    except PersistenceError:
        messages.error(request, 'The analysis finished but could not be saved. Please try again.')
        analysis = None

    store_recovery_flow(request, resume, flow)
    _report(request, flow, analysis)
    return redirect('resume_detail', resume_id=resume.id)


@login_required
@require_POST
def analysis_credential(request, resume_id):
    """Store a replacement API key and retry the pending analysis."""
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    flow = load_recovery_flow(request, resume)
    api_key = (request.POST.get('api_key') or '').strip()

    if not flow.accepts_credential:
        messages.error(request, 'There is no analysis waiting for a new API key.')
        return redirect('resume_detail', resume_id=resume.id)
    if not api_key:
        messages.error(request, 'Please enter an API key.')
        return redirect('resume_detail', resume_id=resume.id)

    set_api_key(request, api_key)
    try:
        analysis = flow.submit_credential(api_key)
    except InputError as exc:
        messages.error(request, f'Could not analyze this resume: {exc}')
        analysis = None
    except PersistenceError:
        messages.error(request, 'The analysis finished but could not be saved. Please try again.')
        analysis = None

    store_recovery_flow(request, resume, flow)
    _report(request, flow, analysis)
    return redirect('resume_detail', resume_id=resume.id)


@login_required
@require_POST
def analysis_dismiss(request, resume_id):
    """Close the analysis modal and abandon the pending request."""
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    flow = load_recovery_flow(request, resume)
    flow.dismiss()
    store_recovery_flow(request, resume, flow)
    return redirect('resume_detail', resume_id=resume.id)


@login_required
@require_POST
def analysis_delete(request, resume_id, analysis_id):
    """Delete one stored analysis."""
    resume = get_object_or_404(Resume, id=resume_id, user=request.user)
    try:
        delete_analysis(analysis_id, user=request.user)
        messages.success(request, 'Analysis deleted.')
    except PersistenceError:
        logger.exception("Failed to delete analysis %s", analysis_id)
        messages.error(request, 'Could not delete the analysis. Please try again.')
    return redirect('resume_detail', resume_id=resume.id)
