from unittest import mock

from django.test import override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from resumes.editing import DebouncedSaver, FieldAutosaver
from resumes.models import PersonalInfo, Resume, Skill, WorkExperience


@override_settings(RESUME_COPY_PARALLEL=False)
class ResumeApiTests(APITestCase):

    def setUp(self) -> None:
        self.user = User.objects.create_user(username="rest@example.com", password="pw-12345")
        self.client.force_authenticate(self.user)
        self.resume = Resume.objects.create(user=self.user, title="Backend")

    def test_list_only_own_resumes(self) -> None:
        other = User.objects.create_user(username="other@example.com", password="pw-12345")
        Resume.objects.create(user=other, title="Theirs")

        response = self.client.get(reverse("resume-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["title"] for row in response.data], ["Backend"])

    def test_create_and_limit(self) -> None:
        with self.settings(RESUME_LIMIT=2):
            created = self.client.post(reverse("resume-list"), {"title": " Frontend "}, format="json")
            blocked = self.client.post(reverse("resume-list"), {"title": "Third"}, format="json")

        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(created.data["title"], "Frontend")
        self.assertEqual(blocked.status_code, status.HTTP_403_FORBIDDEN)
        self.assertIn("maximum limit", blocked.data["error"])

    def test_blank_title_rejected(self) -> None:
        response = self.client.post(reverse("resume-list"), {"title": "  "}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_retrieve_returns_full_record(self) -> None:
        Skill.objects.create(resume=self.resume, name="Python")

        response = self.client.get(reverse("resume-detail", kwargs={"pk": self.resume.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data["personal_info"])
        self.assertEqual(response.data["skills"][0]["name"], "Python")

    def test_duplicate(self) -> None:
        Skill.objects.create(resume=self.resume, name="Python")

        response = self.client.post(reverse("resume-duplicate", kwargs={"pk": self.resume.pk}))

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["title"], "Backend (Copy)")
        self.assertTrue(Skill.objects.filter(resume_id=response.data["id"], name="Python").exists())

    def test_personal_info(self) -> None:
        url = reverse("resume-personal-info", kwargs={"pk": self.resume.pk})

        response = self.client.put(url, {"full_name": "Ada", "email": "not-an-email"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.put(url, {"full_name": "Ada", "location": "London"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["location"], "London")

    def test_section_entries(self) -> None:
        add_url = reverse("resume-sections", kwargs={"pk": self.resume.pk, "section": "work_experience"})

        response = self.client.post(
            add_url,
            {"job_title": "Dev", "start_date": "2020-01-01", "end_date": "", "is_current": True},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        entry_id = response.data["id"]

        entry_url = reverse(
            "resume-section-entry",
            kwargs={"pk": self.resume.pk, "section": "work_experience", "entry_id": entry_id},
        )
        response = self.client.patch(entry_url, {"company": "Acme"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["company"], "Acme")

        self.assertEqual(self.client.delete(entry_url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete(entry_url).status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(WorkExperience.objects.exists())

    def test_blank_skill_is_ignored(self) -> None:
        url = reverse("resume-sections", kwargs={"pk": self.resume.pk, "section": "skills"})

        response = self.client.post(url, {"name": " "}, format="json")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Skill.objects.exists())

    def test_unknown_section(self) -> None:
        url = reverse("resume-sections", kwargs={"pk": self.resume.pk, "section": "hobbies"})
        response = self.client.post(url, {"name": "Chess"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cannot_touch_other_users_resume(self) -> None:
        other = User.objects.create_user(username="other@example.com", password="pw-12345")
        foreign = Resume.objects.create(user=other, title="Theirs")

        response = self.client.delete(reverse("resume-detail", kwargs={"pk": foreign.pk}))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertTrue(Resume.objects.filter(pk=foreign.pk).exists())

    def test_form_encoded_section_entries(self) -> None:
        skills_url = reverse("resume-sections", kwargs={"pk": self.resume.pk, "section": "skills"})
        response = self.client.post(skills_url, {"name": " Python "}, format="multipart")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["name"], "Python")

        work_url = reverse("resume-sections", kwargs={"pk": self.resume.pk, "section": "work_experience"})
        response = self.client.post(
            work_url,
            {"job_title": "Dev", "start_date": "2019-01-01", "end_date": "2020-06-30", "is_current": "false"},
            format="multipart",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        past = WorkExperience.objects.get(pk=response.data["id"])
        self.assertFalse(past.is_current)
        self.assertEqual(str(past.end_date), "2020-06-30")

        response = self.client.post(
            work_url,
            {"job_title": "Lead", "start_date": "2021-01-01", "end_date": "", "is_current": "true"},
            format="multipart",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        current = WorkExperience.objects.get(pk=response.data["id"])
        self.assertTrue(current.is_current)
        self.assertIsNone(current.end_date)

    def test_form_encoded_personal_info(self) -> None:
        url = reverse("resume-personal-info", kwargs={"pk": self.resume.pk})

        response = self.client.put(url, {"full_name": "Ada", "location": "London"}, format="multipart")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["full_name"], "Ada")

    @mock.patch("resumes.views.connection")
    def test_autosave_is_debounced(self, _connection) -> None:
        autosaver = FieldAutosaver(DebouncedSaver(60))
        url = reverse("resume-autosave", kwargs={"pk": self.resume.pk})

        with mock.patch("resumes.views.personal_info_autosaver", autosaver):
            first = self.client.patch(url, {"full_name": "Ada"}, format="json")
            second = self.client.patch(url, {"location": "London"}, format="json")

            self.assertEqual(first.status_code, status.HTTP_202_ACCEPTED)
            self.assertEqual(second.data, {"status": "pending"})
            self.assertFalse(PersonalInfo.objects.exists())

            autosaver.flush()

        info = PersonalInfo.objects.get(resume=self.resume)
        self.assertEqual((info.full_name, info.location), ("Ada", "London"))

    def test_autosave_rejects_invalid_fields(self) -> None:
        url = reverse("resume-autosave", kwargs={"pk": self.resume.pk})

        response = self.client.patch(url, {"email": "not-an-email"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
