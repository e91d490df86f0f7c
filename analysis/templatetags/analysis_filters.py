from django import template
from django.utils.safestring import mark_safe

from analysis.markup import sanitize_analysis_markup

register = template.Library()


@register.filter
def analysis_markup(value):
    """Render a stored analysis result with only the allowed markup."""
    if not value:
        return ""
    return mark_safe(sanitize_analysis_markup(value))
