from types import SimpleNamespace
from unittest import mock

from django.test import RequestFactory, SimpleTestCase, override_settings

from accounts.utils import (
    SESSION_API_KEY,
    clear_api_key,
    get_api_key,
    has_session_api_key,
    safe_next_url,
    set_api_key,
)


def fake_request(session=None):
    return SimpleNamespace(session=dict(session or {}), user=SimpleNamespace(pk=1))


@mock.patch.dict("os.environ", {}, clear=True)
class ApiKeyHelpersTests(SimpleTestCase):
    """Session credential helpers."""

    @override_settings(GROQ_API_KEY="gsk-server")
    def test_falls_back_to_server_key(self) -> None:
        self.assertEqual(get_api_key(fake_request()), "gsk-server")

    @override_settings(GROQ_API_KEY="")
    def test_no_key_anywhere(self) -> None:
        self.assertEqual(get_api_key(fake_request()), "")

    @override_settings(GROQ_API_KEY="gsk-server")
    def test_session_key_wins(self) -> None:
        request = fake_request({SESSION_API_KEY: "gsk-user"})
        self.assertEqual(get_api_key(request), "gsk-user")

    def test_set_and_clear(self) -> None:
        request = fake_request()

        set_api_key(request, "  gsk-new ")
        self.assertEqual(request.session[SESSION_API_KEY], "gsk-new")
        self.assertTrue(has_session_api_key(request))

        clear_api_key(request)
        self.assertFalse(has_session_api_key(request))
        clear_api_key(request)

    def test_empty_key_rejected(self) -> None:
        request = fake_request()
        with self.assertRaises(ValueError):
            set_api_key(request, "   ")
        self.assertNotIn(SESSION_API_KEY, request.session)


class SafeNextUrlTests(SimpleTestCase):

    def setUp(self) -> None:
        self.factory = RequestFactory()

    def test_local_path_kept(self) -> None:
        request = self.factory.post("/resumes/theme/", {"next": "/resumes/4/"})
        self.assertEqual(safe_next_url(request), "/resumes/4/")

    def test_missing_next_uses_default(self) -> None:
        request = self.factory.post("/login/", {})
        self.assertEqual(safe_next_url(request), "dashboard")
        self.assertEqual(safe_next_url(request, default="login"), "login")

    def test_foreign_targets_rejected(self) -> None:
        for target in ("https://evil.example/", "//evil.example/path", "javascript:alert(1)"):
            with self.subTest(target=target):
                request = self.factory.post("/login/", {"next": target})
                with self.assertLogs("accounts.utils", level="WARNING"):
                    self.assertEqual(safe_next_url(request), "dashboard")
