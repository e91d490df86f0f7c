"""
Resumes app models

A Resume owns one optional PersonalInfo row and any number of rows in each
section table. Section tables share the ``resume`` foreign key so they can be
copied and listed generically.
"""
from django.conf import settings
from django.db import models


class Resume(models.Model):
    """
    Top-level resume document owned by a user.
    """

    class TemplateStyle(models.TextChoices):
        MODERN = 'modern', 'Modern'
        PROFESSIONAL = 'professional', 'Professional'
        MINIMAL = 'minimal', 'Minimal'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='resumes',
    )
    title = models.CharField(max_length=255)
    template_style = models.CharField(
        max_length=20,
        choices=TemplateStyle.choices,
        default=TemplateStyle.MODERN,
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} ({self.user.username})"

    class Meta:
        verbose_name = 'Resume'
        verbose_name_plural = 'Resumes'
        ordering = ['-updated_at']


class PersonalInfo(models.Model):
    resume = models.OneToOneField(
        Resume,
        on_delete=models.CASCADE,
        related_name='personal_info',
    )
    full_name = models.CharField(max_length=255, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    summary = models.TextField(blank=True, null=True)

    def __str__(self):
        return f"Personal info for {self.resume.title}"


class SectionEntry(models.Model):
    """
    Abstract base for one-to-many resume sections.

    Subclasses declare their own ``resume`` foreign key so the reverse
    accessor on Resume matches the section name.
    """

    # Column names copied by duplicate_resume (everything except keys)
    @classmethod
    def copyable_fields(cls):
        return [
            f.name for f in cls._meta.concrete_fields
            if not f.primary_key and f.name != 'resume'
        ]

    class Meta:
        abstract = True


class WorkExperience(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='work_experience')
    job_title = models.CharField(max_length=255, blank=True, null=True)
    company = models.CharField(max_length=255, blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    is_current = models.BooleanField(default=False)
    description = models.TextField(blank=True, null=True)

    def __str__(self):
        return f"{self.job_title or 'Role'} at {self.company or 'Unknown'}"


class Education(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='education')
    school = models.CharField(max_length=255, blank=True, null=True)
    degree = models.CharField(max_length=255, blank=True, null=True)
    field_of_study = models.CharField(max_length=255, blank=True, null=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    is_current = models.BooleanField(default=False)
    description = models.TextField(blank=True, null=True)

    class Meta:
        verbose_name_plural = 'Education'


class Skill(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='skills')
    name = models.CharField(max_length=100)

    def __str__(self):
        return self.name


class Language(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='languages')
    name = models.CharField(max_length=100)
    proficiency = models.CharField(max_length=50, blank=True, null=True, default='Native')

    def __str__(self):
        return self.name


class ExtraCurricular(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='extra_curricular')
    title = models.CharField(max_length=255)
    organization = models.CharField(max_length=255, blank=True, null=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    is_current = models.BooleanField(default=False)
    description = models.TextField(blank=True, null=True)

    class Meta:
        verbose_name_plural = 'Extra curricular'


class Certification(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='certifications')
    name = models.CharField(max_length=255)
    issuer = models.CharField(max_length=255, blank=True)
    issue_date = models.DateField(blank=True, null=True)
    expiration_date = models.DateField(blank=True, null=True)
    url = models.URLField(blank=True, null=True)

    def __str__(self):
        return self.name


class HonorAward(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='honors_awards')
    title = models.CharField(max_length=255)
    issuer = models.CharField(max_length=255, blank=True, null=True)
    award_date = models.DateField(blank=True, null=True)
    description = models.TextField(blank=True, null=True)


class Reference(SectionEntry):
    resume = models.ForeignKey(Resume, on_delete=models.CASCADE, related_name='resume_references')
    name = models.CharField(max_length=255)
    position = models.CharField(max_length=255, blank=True, null=True)
    organization = models.CharField(max_length=255, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    relationship = models.CharField(max_length=100, blank=True, null=True)


# Related name on Resume -> model, in display order.
SECTION_MODELS = {
    'work_experience': WorkExperience,
    'education': Education,
    'skills': Skill,
    'languages': Language,
    'extra_curricular': ExtraCurricular,
    'certifications': Certification,
    'honors_awards': HonorAward,
    'resume_references': Reference,
}
