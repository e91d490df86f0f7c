from django.test import TestCase, override_settings
from django.urls import reverse

from accounts.models import User
from resumes.models import PersonalInfo, Resume, Skill, WorkExperience


@override_settings(RESUME_COPY_PARALLEL=False)
class ResumeFrontendViewsTests(TestCase):

    def setUp(self) -> None:
        self.user = User.objects.create_user(username="editor@example.com", password="pw-12345")
        self.resume = Resume.objects.create(user=self.user, title="Backend")
        self.client.force_login(self.user)
        self.detail_url = reverse("resume_detail", kwargs={"resume_id": self.resume.id})

    def test_detail_renders_editor(self) -> None:
        Skill.objects.create(resume=self.resume, name="Python")

        response = self.client.get(self.detail_url)

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Backend")
        self.assertContains(response, "Python")
        self.assertContains(response, 'id="save-status"')
        self.assertContains(response, 'data-autosave-url="/api/resumes/%s/autosave/"' % self.resume.id)
        labels = [section["label"] for section in response.context["sections"]]
        self.assertIn("Work Experience", labels)
        self.assertIsNone(response.context["record"]["personal_info"])

    def test_detail_of_other_users_resume_is_404(self) -> None:
        other = User.objects.create_user(username="other@example.com", password="pw-12345")
        foreign = Resume.objects.create(user=other, title="Theirs")

        response = self.client.get(reverse("resume_detail", kwargs={"resume_id": foreign.id}))

        self.assertEqual(response.status_code, 404)

    def test_create_redirects_to_editor(self) -> None:
        response = self.client.post(reverse("resume_create"), {"title": "Data"})

        created = Resume.objects.get(title="Data")
        self.assertRedirects(response, reverse("resume_detail", kwargs={"resume_id": created.id}))

    @override_settings(RESUME_LIMIT=1)
    def test_create_over_limit_stays_on_dashboard(self) -> None:
        response = self.client.post(reverse("resume_create"), {"title": "Data"}, follow=True)

        self.assertRedirects(response, reverse("dashboard"))
        self.assertEqual(Resume.objects.filter(user=self.user).count(), 1)
        self.assertContains(response, "maximum limit")

    def test_rename_and_duplicate_and_delete(self) -> None:
        self.client.post(reverse("resume_rename", kwargs={"resume_id": self.resume.id}), {"title": " Platform "})
        self.resume.refresh_from_db()
        self.assertEqual(self.resume.title, "Platform")

        self.client.post(reverse("resume_duplicate", kwargs={"resume_id": self.resume.id}))
        self.assertTrue(Resume.objects.filter(user=self.user, title="Platform (Copy)").exists())

        response = self.client.post(reverse("resume_delete", kwargs={"resume_id": self.resume.id}))
        self.assertRedirects(response, reverse("dashboard"))
        self.assertFalse(Resume.objects.filter(pk=self.resume.pk).exists())

    def test_personal_info_and_sections(self) -> None:
        self.client.post(
            reverse("resume_personal_info", kwargs={"resume_id": self.resume.id}),
            {"full_name": "Ada Lovelace", "location": "London"},
        )
        self.assertEqual(PersonalInfo.objects.get(resume=self.resume).full_name, "Ada Lovelace")

        response = self.client.post(
            reverse("resume_section_add", kwargs={"resume_id": self.resume.id, "section": "work_experience"}),
            {"job_title": "Engineer", "company": "Acme", "start_date": "2021-03-01", "is_current": "on"},
        )
        self.assertRedirects(response, self.detail_url)
        entry = WorkExperience.objects.get(resume=self.resume)
        self.assertTrue(entry.is_current)

        self.client.post(
            reverse(
                "resume_section_delete",
                kwargs={"resume_id": self.resume.id, "section": "work_experience", "entry_id": entry.id},
            )
        )
        self.assertFalse(WorkExperience.objects.exists())

    def test_unknown_section_is_404(self) -> None:
        response = self.client.post(
            reverse("resume_section_add", kwargs={"resume_id": self.resume.id, "section": "hobbies"}),
            {"name": "Chess"},
        )
        self.assertEqual(response.status_code, 404)

    def test_theme_toggle(self) -> None:
        self.client.post(reverse("editor_theme"), {"theme": "dark", "next": self.detail_url})
        self.assertEqual(self.client.session["editor_theme"], "dark")

        response = self.client.get(self.detail_url)
        self.assertEqual(response.context["theme"], "dark")

    def test_offsite_next_is_ignored(self) -> None:
        response = self.client.post(reverse("editor_theme"), {"theme": "dark", "next": "https://evil.example/"})
        self.assertRedirects(response, reverse("dashboard"), fetch_redirect_response=False)

        response = self.client.post(
            reverse("resume_rename", kwargs={"resume_id": self.resume.id}),
            {"title": "Renamed", "next": "//evil.example/"},
        )
        self.assertRedirects(response, reverse("dashboard"), fetch_redirect_response=False)
