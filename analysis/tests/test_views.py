from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from accounts.models import User
from accounts.utils import SESSION_API_KEY
from analysis.exceptions import AuthError, PersistenceError, ServiceUnavailable
from analysis.models import AnalysisResult
from analysis.services import save_analysis
from resumes.models import Resume, Skill


class AnalysisApiTests(APITestCase):

    def setUp(self) -> None:
        self.user = User.objects.create_user(username="api@example.com", password="pw-12345")
        self.resume = Resume.objects.create(user=self.user, title="Backend")
        Skill.objects.create(resume=self.resume, name="Python")
        self.client.force_authenticate(self.user)
        self.url = reverse("resume-analyses", kwargs={"pk": self.resume.pk})

    @mock.patch("analysis.services.AnalysisClient")
    def test_create_analysis(self, mock_client) -> None:
        mock_client.return_value.analyze.return_value = "<h4>ATS Score</h4>"

        with mock.patch.dict("os.environ", {"GROQ_API_KEY": "gsk-server"}):
            response = self.client.post(self.url, {"job_description": "ML Engineer\nPyTorch"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["job_title"], "ML Engineer")
        self.assertEqual(response.data["resume_id"], self.resume.pk)
        self.assertEqual(response.data["analysis_result"], "<h4>ATS Score</h4>")
        mock_client.assert_called_once_with("gsk-server")

    @mock.patch("analysis.services.AnalysisClient")
    def test_session_key_takes_precedence(self, mock_client) -> None:
        mock_client.return_value.analyze.return_value = "<p>ok</p>"
        session = self.client.session
        session[SESSION_API_KEY] = "gsk-user"
        session.save()

        self.client.post(self.url, {}, format="json")

        mock_client.assert_called_once_with("gsk-user")

    @mock.patch("analysis.services.AnalysisClient")
    def test_error_codes(self, mock_client) -> None:
        cases = [
            (AuthError("expired"), status.HTTP_401_UNAUTHORIZED, "invalid_api_key"),
            (ServiceUnavailable("down"), status.HTTP_503_SERVICE_UNAVAILABLE, "service_unavailable"),
        ]
        for error, http_status, code in cases:
            mock_client.return_value.analyze.side_effect = error
            response = self.client.post(self.url, {"job_description": ""}, format="json")
            self.assertEqual(response.status_code, http_status)
            self.assertEqual(response.data["error"], code)

        self.assertFalse(AnalysisResult.objects.exists())

    @mock.patch("analysis.services.save_analysis", side_effect=PersistenceError("disk full"))
    @mock.patch("analysis.services.AnalysisClient")
    def test_persistence_error_code(self, mock_client, _save) -> None:
        mock_client.return_value.analyze.return_value = "<p>ok</p>"

        response = self.client.post(self.url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["error"], "persistence_error")

    def test_input_error_when_record_is_missing(self) -> None:
        with mock.patch("analysis.views.ResumeService.get_resume_with_all_data", return_value=None):
            response = self.client.post(self.url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "input_error")

    def test_list_newest_first(self) -> None:
        for index in range(4):
            save_analysis(self.resume.pk, f"Job {index}", "<p>x</p>")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["job_title"] for row in response.data], ["Job 3", "Job 2", "Job 1"])

    def test_cannot_analyze_someone_elses_resume(self) -> None:
        other = User.objects.create_user(username="other@example.com", password="pw-12345")
        foreign = Resume.objects.create(user=other, title="Theirs")

        response = self.client.post(reverse("resume-analyses", kwargs={"pk": foreign.pk}), {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_is_idempotent(self) -> None:
        record = save_analysis(self.resume.pk, "Job", "<p>x</p>")
        url = reverse("analysis-detail", kwargs={"pk": record.pk})

        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(self.client.delete(url).status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(AnalysisResult.objects.exists())

    def test_requires_authentication(self) -> None:
        self.client.force_authenticate(None)
        response = self.client.get(self.url)
        self.assertIn(response.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
