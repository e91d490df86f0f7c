"""
Frontend URLs for resumes app.
"""
from django.urls import path
from . import frontend_views

urlpatterns = [
    path('create/', frontend_views.resume_create, name='resume_create'),
    path('theme/', frontend_views.editor_theme, name='editor_theme'),
    path('<int:resume_id>/', frontend_views.resume_detail, name='resume_detail'),
    path('<int:resume_id>/rename/', frontend_views.resume_rename, name='resume_rename'),
    path('<int:resume_id>/duplicate/', frontend_views.resume_duplicate, name='resume_duplicate'),
    path('<int:resume_id>/delete/', frontend_views.resume_delete, name='resume_delete'),
    path(
        '<int:resume_id>/personal-info/',
        frontend_views.resume_personal_info,
        name='resume_personal_info',
    ),
    path(
        '<int:resume_id>/sections/<str:section>/',
        frontend_views.resume_section_add,
        name='resume_section_add',
    ),
    path(
        '<int:resume_id>/sections/<str:section>/<int:entry_id>/delete/',
        frontend_views.resume_section_delete,
        name='resume_section_delete',
    ),
]
