"""
Resumes app views

ViewSet for resumes, their sections and their analyses.
"""
import logging
from functools import partial

from django.core.exceptions import ValidationError
from django.db import connection
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounts.permissions import IsOwner
from analysis.views import create_analysis, list_analyses

from .editing import FieldAutosaver
from .models import Resume
from .serializers import PersonalInfoSerializer, ResumeSerializer, SECTION_SERIALIZERS
from .services import EntryNotFound, ResumeLimitError, ResumeService, SectionError, plain_data

logger = logging.getLogger(__name__)

SECTION_PATTERN = r'sections/(?P<section>[a-z_]+)'

personal_info_autosaver = FieldAutosaver()


def _validation_errors(exc: ValidationError):
    if hasattr(exc, 'error_dict'):
        return exc.message_dict
    return {'error': exc.messages}


def _persist_personal_info(resume_id, changes):
    try:
        resume = Resume.objects.get(pk=resume_id)
        ResumeService.save_personal_info(resume, changes)
        logger.debug("Autosaved %s for resume %s", ", ".join(sorted(changes)), resume_id)
    finally:
        # Runs on the autosave timer thread
        connection.close()


class ResumeViewSet(viewsets.ModelViewSet):
    """
    ViewSet for Resume.

    - GET/POST: List or create the current user's resumes (limit enforced)
    - GET {id}: Full resume record with every section
    - PATCH {id}: Rename or change template
    - POST {id}/duplicate/: Copy a resume with all sections
    - PUT {id}/personal-info/: Create or update personal info
    - PATCH {id}/autosave/: Queue personal info edits for a debounced save
    - POST {id}/sections/{section}/: Add an entry
    - PATCH/DELETE {id}/sections/{section}/{entry_id}/: Edit or delete an entry
    - GET/POST {id}/analyses/: List or run ATS analyses
    """

    serializer_class = ResumeSerializer
    permission_classes = [IsAuthenticated, IsOwner]

    def get_queryset(self):
        return Resume.objects.filter(user=self.request.user)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            ResumeService.ensure_capacity(request.user)
        except ResumeLimitError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        resume = serializer.save(user=request.user)
        logger.info("Created resume %s for user %s", resume.pk, request.user.pk)
        return Response(self.get_serializer(resume).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        resume = self.get_object()
        return Response(ResumeService.get_resume_with_all_data(resume.pk, user=request.user))

    def perform_destroy(self, instance):
        ResumeService.delete_resume(instance)

    @action(detail=True, methods=['post'])
    def duplicate(self, request, pk=None):
        """
        POST /api/resumes/{id}/duplicate/
        """
        resume = self.get_object()
        try:
            copy = ResumeService.duplicate_resume(resume, request.user)
        except ResumeLimitError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        return Response(self.get_serializer(copy).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['put'], url_path='personal-info')
    def personal_info(self, request, pk=None):
        """
        PUT /api/resumes/{id}/personal-info/
        """
        resume = self.get_object()
        try:
            info = ResumeService.save_personal_info(resume, request.data)
        except ValidationError as e:
            return Response(_validation_errors(e), status=status.HTTP_400_BAD_REQUEST)
        return Response(PersonalInfoSerializer(info).data)

    @action(detail=True, methods=['patch'])
    def autosave(self, request, pk=None):
        """
        PATCH /api/resumes/{id}/autosave/

        Edits are merged and saved once the editor has been quiet for
        AUTOSAVE_QUIET_PERIOD_SECONDS.
        """
        resume = self.get_object()
        serializer = PersonalInfoSerializer(data=plain_data(request.data), partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        personal_info_autosaver.edit(
            (resume.pk, 'personal_info'),
            dict(serializer.validated_data),
            partial(_persist_personal_info, resume.pk),
        )
        return Response({'status': 'pending'}, status=status.HTTP_202_ACCEPTED)

    @action(detail=True, methods=['post'], url_path=SECTION_PATTERN)
    def sections(self, request, pk=None, section=None):
        """
        POST /api/resumes/{id}/sections/{section}/

        Blank skill and language names are ignored (204).
        """
        resume = self.get_object()
        try:
            entry = ResumeService.add_section_entry(resume, section, request.data)
        except SectionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ValidationError as e:
            return Response(_validation_errors(e), status=status.HTTP_400_BAD_REQUEST)

        if entry is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(SECTION_SERIALIZERS[section](entry).data, status=status.HTTP_201_CREATED)

    @action(
        detail=True,
        methods=['patch', 'delete'],
        url_path=SECTION_PATTERN + r'/(?P<entry_id>\d+)',
    )
    def section_entry(self, request, pk=None, section=None, entry_id=None):
        """
        PATCH/DELETE /api/resumes/{id}/sections/{section}/{entry_id}/
        """
        resume = self.get_object()
        try:
            if request.method == 'DELETE':
                if not ResumeService.delete_section_entry(resume, section, entry_id):
                    return Response({'error': 'Entry not found.'}, status=status.HTTP_404_NOT_FOUND)
                return Response(status=status.HTTP_204_NO_CONTENT)

            entry = ResumeService.edit_section_entry(resume, section, entry_id, request.data)
        except EntryNotFound as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except SectionError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        except ValidationError as e:
            return Response(_validation_errors(e), status=status.HTTP_400_BAD_REQUEST)

        return Response(SECTION_SERIALIZERS[section](entry).data)

    @action(detail=True, methods=['get', 'post'])
    def analyses(self, request, pk=None):
        """
        GET  /api/resumes/{id}/analyses/ - newest first, at most three
        POST /api/resumes/{id}/analyses/ - run and store a new analysis
        """
        resume = self.get_object()
        if request.method == 'POST':
            return create_analysis(request, resume)
        return list_analyses(resume)
