from django.contrib import admin

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


class PersonalInfoInline(admin.StackedInline):
    model = PersonalInfo
    extra = 0


class WorkExperienceInline(admin.TabularInline):
    model = WorkExperience
    extra = 0


class EducationInline(admin.TabularInline):
    model = Education
    extra = 0


class SkillInline(admin.TabularInline):
    model = Skill
    extra = 0


@admin.register(Resume)
class ResumeAdmin(admin.ModelAdmin):
    """Admin interface for Resume."""

    list_display = ['id', 'title', 'user', 'template_style', 'created_at', 'updated_at']
    list_filter = ['template_style', 'created_at', 'updated_at']
    search_fields = ['title', 'user__username', 'user__email']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [PersonalInfoInline, WorkExperienceInline, EducationInline, SkillInline]


admin.site.register([Language, ExtraCurricular, Certification, HonorAward, Reference])
