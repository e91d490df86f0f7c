"""
Analysis app models

AnalysisResult stores the most recent ATS critiques of a resume.
"""
from django.db import models


class AnalysisResult(models.Model):
    """
    One stored ATS analysis.

    Rows are never edited. At most three are kept per resume; older rows are
    removed when a new analysis is saved.
    """

    resume = models.ForeignKey(
        'resumes.Resume',
        on_delete=models.CASCADE,
        related_name='analyses',
    )

    # Verbatim job description (empty for a general audit)
    job_description = models.TextField(blank=True, default='')

    # Raw HTML fragment returned by the generation backend
    analysis_result = models.TextField()

    # Label derived from the first line of the job description
    job_title = models.CharField(max_length=30)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.job_title} for resume {self.resume_id}"

    class Meta:
        verbose_name = 'Analysis Result'
        verbose_name_plural = 'Analysis Results'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['resume', 'created_at'], name='analysis_resume_created_idx'),
        ]
