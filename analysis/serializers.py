"""
Analysis app serializers
"""
from rest_framework import serializers

from .models import AnalysisResult


class AnalysisResultSerializer(serializers.ModelSerializer):
    """
    Stored analysis record as returned by the API.
    """

    resume_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = AnalysisResult
        fields = [
            'id',
            'resume_id',
            'job_description',
            'analysis_result',
            'job_title',
            'created_at',
        ]
        read_only_fields = fields


class AnalysisRequestSerializer(serializers.Serializer):
    """
    Input for POST /api/resumes/{id}/analyses/
    """

    job_description = serializers.CharField(
        required=False,
        allow_blank=True,
        allow_null=True,
        trim_whitespace=False,
        default='',
    )
