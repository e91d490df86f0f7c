from unittest import mock

from django.test import TestCase
from django.urls import reverse

from accounts.models import User
from accounts.utils import SESSION_API_KEY
from analysis.exceptions import AuthError, ServiceUnavailable
from analysis.frontend_views import recovery_session_key
from analysis.models import AnalysisResult
from resumes.models import Resume


@mock.patch("analysis.services.AnalysisClient")
class AnalysisFrontendViewsTests(TestCase):
    """Run / retry / dismiss through the server-rendered editor."""

    def setUp(self) -> None:
        self.user = User.objects.create_user(username="web@example.com", password="pw-12345")
        self.resume = Resume.objects.create(user=self.user, title="Backend")
        self.client.force_login(self.user)
        self.detail_url = reverse("resume_detail", kwargs={"resume_id": self.resume.id})

    def _run(self, job_description="Platform Engineer\nGo, Kubernetes"):
        return self.client.post(
            reverse("analysis_run", kwargs={"resume_id": self.resume.id}),
            {"job_description": job_description},
        )

    def _snapshot(self):
        return self.client.session.get(recovery_session_key(self.resume.id))

    def test_successful_run_stores_analysis(self, mock_client) -> None:
        mock_client.return_value.analyze.return_value = "<h4>ATS Score</h4>"

        response = self._run()

        self.assertRedirects(response, self.detail_url)
        record = AnalysisResult.objects.get(resume=self.resume)
        self.assertEqual(record.job_title, "Platform Engineer")
        self.assertEqual(self._snapshot()["state"], "idle")

    def test_invalid_key_opens_modal_and_retry_saves(self, mock_client) -> None:
        mock_client.return_value.analyze.side_effect = [AuthError("expired"), "<p>retried</p>"]

        self._run()

        self.assertEqual(self._snapshot()["variant"], "invalid_key")
        page = self.client.get(self.detail_url)
        self.assertContains(page, 'id="api-key"')
        self.assertContains(page, 'type="password"')
        self.assertFalse(AnalysisResult.objects.exists())

        response = self.client.post(
            reverse("analysis_credential", kwargs={"resume_id": self.resume.id}),
            {"api_key": "gsk-new"},
        )

        self.assertRedirects(response, self.detail_url)
        self.assertEqual(mock_client.call_args_list[-1], mock.call("gsk-new"))
        self.assertEqual(self.client.session[SESSION_API_KEY], "gsk-new")
        self.assertEqual(AnalysisResult.objects.get().job_title, "Platform Engineer")
        self.assertEqual(self._snapshot()["state"], "idle")

    def test_empty_key_is_rejected_without_retry(self, mock_client) -> None:
        mock_client.return_value.analyze.side_effect = AuthError("expired")
        self._run()

        self.client.post(
            reverse("analysis_credential", kwargs={"resume_id": self.resume.id}),
            {"api_key": "   "},
        )

        self.assertEqual(mock_client.return_value.analyze.call_count, 1)
        self.assertEqual(self._snapshot()["variant"], "invalid_key")

    def test_service_unavailable_modal_has_no_key_input(self, mock_client) -> None:
        mock_client.return_value.analyze.side_effect = ServiceUnavailable("down")

        self._run()
        page = self.client.get(self.detail_url)

        self.assertContains(page, "not available right now")
        self.assertNotContains(page, 'id="api-key"')

    def test_dismiss_abandons_request(self, mock_client) -> None:
        mock_client.return_value.analyze.side_effect = AuthError("expired")
        self._run()

        self.client.post(reverse("analysis_dismiss", kwargs={"resume_id": self.resume.id}))

        self.assertEqual(self._snapshot(), {"state": "idle", "variant": None, "job_description": None})
        self.client.post(
            reverse("analysis_credential", kwargs={"resume_id": self.resume.id}),
            {"api_key": "gsk-new"},
        )
        self.assertEqual(mock_client.return_value.analyze.call_count, 1)

    def test_delete_analysis(self, mock_client) -> None:
        mock_client.return_value.analyze.return_value = "<p>x</p>"
        self._run()
        record = AnalysisResult.objects.get()

        url = reverse("analysis_delete", kwargs={"resume_id": self.resume.id, "analysis_id": record.id})
        self.assertRedirects(self.client.post(url), self.detail_url)
        self.assertRedirects(self.client.post(url), self.detail_url)
        self.assertFalse(AnalysisResult.objects.exists())
