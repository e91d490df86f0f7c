"""
Analysis app views

API endpoints for running, listing and deleting ATS analyses.
"""
import logging

from rest_framework import mixins, status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.utils import get_api_key
from resumes.services import ResumeService

from .exceptions import AuthError, InputError, PersistenceError, ServiceUnavailable
from .models import AnalysisResult
from .serializers import AnalysisRequestSerializer, AnalysisResultSerializer
from .services import AnalysisService, delete_analysis, get_recent_analyses

logger = logging.getLogger(__name__)

ERROR_RESPONSES = (
    (InputError, 'input_error', status.HTTP_400_BAD_REQUEST),
    (AuthError, 'invalid_api_key', status.HTTP_401_UNAUTHORIZED),
    (ServiceUnavailable, 'service_unavailable', status.HTTP_503_SERVICE_UNAVAILABLE),
    (PersistenceError, 'persistence_error', status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def error_response(exc: Exception) -> Response:
    """
    Translate an analysis error into an API response with a stable error code.
    """
    for error_class, code, http_status in ERROR_RESPONSES:
        if isinstance(exc, error_class):
            return Response({'error': code, 'detail': str(exc)}, status=http_status)
    raise exc


def list_analyses(resume) -> Response:
    analyses = get_recent_analyses(resume.pk)
    return Response(AnalysisResultSerializer(analyses, many=True).data)


def create_analysis(request, resume) -> Response:
    """
    Run an analysis for ``resume`` with the session credential and store it.

    POST /api/resumes/{id}/analyses/
    """
    serializer = AnalysisRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    job_description = serializer.validated_data.get('job_description') or ''

    record = ResumeService.get_resume_with_all_data(resume.pk, user=request.user)
    try:
        analysis = AnalysisService().analyze_and_save(
            record,
            job_description,
            get_api_key(request),
        )
    except (InputError, AuthError, ServiceUnavailable, PersistenceError) as exc:
        logger.info("Analysis for resume %s failed: %s", resume.pk, exc)
        return error_response(exc)

    return Response(AnalysisResultSerializer(analysis).data, status=status.HTTP_201_CREATED)


class AnalysisResultViewSet(mixins.DestroyModelMixin, viewsets.GenericViewSet):
    """
    ViewSet for stored analyses.

    - DELETE {id}: Remove one analysis (idempotent)
    """

    serializer_class = AnalysisResultSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return AnalysisResult.objects.filter(resume__user=self.request.user)

    def destroy(self, request, *args, **kwargs):
        """
        DELETE /api/analyses/{id}/

        Returns 204 whether or not the analysis still existed.
        """
        try:
            delete_analysis(kwargs.get('pk'), user=request.user)
        except PersistenceError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
