"""
Main project views for frontend pages.
"""
from django.shortcuts import render, redirect
from django.contrib.auth.decorators import login_required
from django.contrib.auth import authenticate, login as auth_login, logout as auth_logout
from django.contrib import messages

from accounts.utils import safe_next_url
from resumes.models import Resume
from resumes.services import ResumeService


def about_view(request):
    """About page view."""
    return render(request, 'about.html')


def login_view(request):
    """Handle user login."""
    if request.user.is_authenticated:
        return redirect('dashboard')

    if request.method == 'POST':
        username = (request.POST.get('username') or '').strip()
        password = request.POST.get('password')
        user = authenticate(request, username=username, password=password)

        if user is not None:
            auth_login(request, user)
            return redirect(safe_next_url(request))
        else:
            messages.error(request, 'Invalid email or password.')

    return render(request, 'login.html')


def logout_view(request):
    """Handle user logout."""
    auth_logout(request)
    messages.success(request, 'Successfully logged out.')
    return redirect('login')


@login_required
def dashboard(request):
    """Main dashboard view: the user's resumes and how many more they can create."""
    resumes = Resume.objects.filter(user=request.user).order_by('-updated_at')
    resume_count = resumes.count()
    resume_limit = ResumeService.resume_limit()

    context = {
        'resumes': resumes,
        'resume_count': resume_count,
        'resume_limit': resume_limit,
        'can_create': resume_count < resume_limit,
    }

    return render(request, 'dashboard.html', context)
