"""
URL configuration for resumebuilder project.

The `urlpatterns` list routes URLs to views. For more information please see:
    https://docs.djangoproject.com/en/4.2/topics/http/urls/
"""
from django.contrib import admin
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from accounts.views import UserViewSet
from analysis.views import AnalysisResultViewSet
from resumes.views import ResumeViewSet
from resumebuilder.views import login_view, logout_view, dashboard, about_view

# Create router and register viewsets
router = DefaultRouter()
router.register(r'users', UserViewSet, basename='user')
router.register(r'resumes', ResumeViewSet, basename='resume')
router.register(r'analyses', AnalysisResultViewSet, basename='analysis')

urlpatterns = [
    # Frontend views
    path('', dashboard, name='dashboard'),
    path('about/', about_view, name='about'),
    path('login/', login_view, name='login'),
    path('logout/', logout_view, name='logout'),
    path('resumes/', include('resumes.frontend_urls')),
    path('analysis/', include('analysis.frontend_urls')),
    path('accounts/', include('accounts.urls')),

    # API views
    path('admin/', admin.site.urls),
    path('api/', include(router.urls)),
    path('api-auth/', include('rest_framework.urls')),
]
