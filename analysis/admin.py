from django.contrib import admin
from .models import AnalysisResult


@admin.register(AnalysisResult)
class AnalysisResultAdmin(admin.ModelAdmin):
    """Admin interface for AnalysisResult."""

    list_display = ['id', 'resume', 'job_title', 'created_at']
    list_filter = ['created_at']
    search_fields = ['job_title', 'resume__title', 'resume__user__username']
    readonly_fields = ['resume', 'job_description', 'analysis_result', 'job_title', 'created_at']

    fieldsets = (
        ('Analysis', {
            'fields': ('resume', 'job_title', 'created_at')
        }),
        ('Input', {
            'fields': ('job_description',),
            'classes': ('collapse',)
        }),
        ('Result', {
            'fields': ('analysis_result',)
        }),
    )
