"""
Resumes app serializers

Serializers for Resume and its section tables.
"""
from rest_framework import serializers

from .models import (
    Certification,
    Education,
    ExtraCurricular,
    HonorAward,
    Language,
    PersonalInfo,
    Reference,
    Resume,
    Skill,
    WorkExperience,
)


class PersonalInfoSerializer(serializers.ModelSerializer):
    class Meta:
        model = PersonalInfo
        fields = ['id', 'full_name', 'email', 'phone', 'location', 'summary']
        read_only_fields = ['id']


class WorkExperienceSerializer(serializers.ModelSerializer):
    class Meta:
        model = WorkExperience
        fields = [
            'id', 'job_title', 'company', 'location',
            'start_date', 'end_date', 'is_current', 'description',
        ]
        read_only_fields = ['id']


class EducationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Education
        fields = [
            'id', 'school', 'degree', 'field_of_study',
            'start_date', 'end_date', 'is_current', 'description',
        ]
        read_only_fields = ['id']


class SkillSerializer(serializers.ModelSerializer):
    class Meta:
        model = Skill
        fields = ['id', 'name']
        read_only_fields = ['id']


class LanguageSerializer(serializers.ModelSerializer):
    class Meta:
        model = Language
        fields = ['id', 'name', 'proficiency']
        read_only_fields = ['id']


class ExtraCurricularSerializer(serializers.ModelSerializer):
    class Meta:
        model = ExtraCurricular
        fields = [
            'id', 'title', 'organization',
            'start_date', 'end_date', 'is_current', 'description',
        ]
        read_only_fields = ['id']


class CertificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Certification
        fields = ['id', 'name', 'issuer', 'issue_date', 'expiration_date', 'url']
        read_only_fields = ['id']


class HonorAwardSerializer(serializers.ModelSerializer):
    class Meta:
        model = HonorAward
        fields = ['id', 'title', 'issuer', 'award_date', 'description']
        read_only_fields = ['id']


class ReferenceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Reference
        fields = [
            'id', 'name', 'position', 'organization',
            'email', 'phone', 'relationship',
        ]
        read_only_fields = ['id']


SECTION_SERIALIZERS = {
    'work_experience': WorkExperienceSerializer,
    'education': EducationSerializer,
    'skills': SkillSerializer,
    'languages': LanguageSerializer,
    'extra_curricular': ExtraCurricularSerializer,
    'certifications': CertificationSerializer,
    'honors_awards': HonorAwardSerializer,
    'resume_references': ReferenceSerializer,
}


class ResumeSerializer(serializers.ModelSerializer):
    """
    Summary serializer used for listing and for create/rename.
    """

    class Meta:
        model = Resume
        fields = ['id', 'user', 'title', 'template_style', 'created_at', 'updated_at']
        read_only_fields = ['id', 'user', 'created_at', 'updated_at']

    def validate_title(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Title is required.')
        return value


class ResumeDetailSerializer(serializers.ModelSerializer):
    """
    Full resume record: the resume plus every related section.

    ``personal_info`` is null when the row has not been created yet.
    """

    personal_info = serializers.SerializerMethodField()
    work_experience = WorkExperienceSerializer(many=True, read_only=True)
    education = EducationSerializer(many=True, read_only=True)
    skills = SkillSerializer(many=True, read_only=True)
    languages = LanguageSerializer(many=True, read_only=True)
    extra_curricular = ExtraCurricularSerializer(many=True, read_only=True)
    certifications = CertificationSerializer(many=True, read_only=True)
    honors_awards = HonorAwardSerializer(many=True, read_only=True)
    resume_references = ReferenceSerializer(many=True, read_only=True)

    class Meta:
        model = Resume
        fields = [
            'id',
            'user',
            'title',
            'template_style',
            'created_at',
            'updated_at',
            'personal_info',
            'work_experience',
            'education',
            'skills',
            'languages',
            'extra_curricular',
            'certifications',
            'honors_awards',
            'resume_references',
        ]
        read_only_fields = fields

    def get_personal_info(self, obj: Resume):
        try:
            info = obj.personal_info
        except PersonalInfo.DoesNotExist:
            return None
        return PersonalInfoSerializer(info).data
