"""
Frontend URLs for analysis app.
"""
from django.urls import path
from . import frontend_views

urlpatterns = [
    path('<int:resume_id>/run/', frontend_views.analysis_run, name='analysis_run'),
    path('<int:resume_id>/credential/', frontend_views.analysis_credential, name='analysis_credential'),
    path('<int:resume_id>/dismiss/', frontend_views.analysis_dismiss, name='analysis_dismiss'),
    path(
        '<int:resume_id>/<int:analysis_id>/delete/',
        frontend_views.analysis_delete,
        name='analysis_delete',
    ),
]
