"""
Credential recovery for analysis requests.

When the generation backend rejects the credential, the request is parked and
the user is asked for a replacement key; submitting one retries the parked
request. A backend outage only offers an acknowledgement. Every retry is
started by the user, and dismissing the modal abandons the request.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .exceptions import AuthError, RecoveryStateError, ServiceUnavailable

logger = logging.getLogger(__name__)


class RecoveryState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    AWAITING_CREDENTIAL = "awaiting_credential"
    RETRYING = "retrying"


class ModalVariant(str, Enum):
    INVALID_KEY = "invalid_key"
    SERVICE_UNAVAILABLE = "service_unavailable"


MODAL_MESSAGES = {
    ModalVariant.INVALID_KEY: "Your API key is invalid or expired. Enter a new key to retry the analysis.",
    ModalVariant.SERVICE_UNAVAILABLE: "The AI model is not available right now. Please try again later.",
}


class CredentialRecoveryFlow:
    """
    State machine around one analysis request at a time.

    ``analyze`` is called as ``analyze(job_description, credential)`` and
    either returns a result or raises one of the analysis errors. Successful
    results are handed to ``on_success(result, job_description)``, whose
    return value becomes the return value of the request.
    """

    def __init__(
        self,
        analyze: Callable[[Optional[str], str], Any],
        on_success: Optional[Callable[[Any, Optional[str]], Any]] = None,
        credential: str = "",
    ):
        self.analyze = analyze
        self.on_success = on_success
        self.credential = credential or ""
        self.state = RecoveryState.IDLE
        self.variant: Optional[ModalVariant] = None
        self.job_description: Optional[str] = None
        self._attempt = 0

    @property
    def modal_open(self) -> bool:
        return self.state == RecoveryState.AWAITING_CREDENTIAL

    @property
    def accepts_credential(self) -> bool:
        return self.modal_open and self.variant == ModalVariant.INVALID_KEY

    @property
    def message(self) -> Optional[str]:
        if not self.modal_open:
            return None
        return MODAL_MESSAGES[self.variant]

    def request_analysis(self, job_description: Optional[str] = None):
        """
        Start a user-initiated analysis.

        Returns:
            The outcome of ``on_success`` (or the raw result), or None if the request is now
            waiting on the user

        Raises:
            RecoveryStateError: If a request is already open
            InputError: If the resume data is missing or malformed
        """
        if self.state != RecoveryState.IDLE:
            raise RecoveryStateError(f"Cannot start an analysis while {self.state.value}.")

        self.job_description = job_description
        return self._run(RecoveryState.ANALYZING)

    def submit_credential(self, credential: str):
        """
        Retry the parked request with a replacement credential.

        Raises:
            RecoveryStateError: Unless the invalid-key modal is open and the
                credential is non-empty
        """
        if not self.accepts_credential:
            raise RecoveryStateError("No request is waiting for a new API key.")
        if not (credential or "").strip():
            raise RecoveryStateError("An API key is required to retry the analysis.")

        self.credential = credential.strip()
        return self._run(RecoveryState.RETRYING)

    def dismiss(self) -> None:
        """
        Close the modal and abandon the current request.

        A result that arrives after this call is discarded.
        """
        if self.state != RecoveryState.IDLE:
            logger.info("Analysis request abandoned from state %s", self.state.value)
        self._attempt += 1
        self._reset()

    def _reset(self) -> None:
        self.state = RecoveryState.IDLE
        self.variant = None
        self.job_description = None

    def _await_credential(self, variant: ModalVariant) -> None:
        self.state = RecoveryState.AWAITING_CREDENTIAL
        self.variant = variant

    def _run(self, state: RecoveryState):
        self._attempt += 1
        attempt = self._attempt
        self.state = state
        self.variant = None

        try:
            result = self.analyze(self.job_description, self.credential)
        except AuthError as exc:
            if attempt == self._attempt:
                logger.info("Analysis credential rejected: %s", exc)
                self._await_credential(ModalVariant.INVALID_KEY)
            return None
        except ServiceUnavailable as exc:
            if attempt == self._attempt:
                logger.info("Analysis backend unavailable: %s", exc)
                self._await_credential(ModalVariant.SERVICE_UNAVAILABLE)
            return None
        except Exception:
            # InputError and unclassified failures end the request
            if attempt == self._attempt:
                self._reset()
            raise

        if attempt != self._attempt:
            logger.info("Discarding analysis result for an abandoned request.")
            return None

        job_description = self.job_description
        self._reset()
        if self.on_success is not None:
            return self.on_success(result, job_description)
        return result

    def snapshot(self) -> Dict[str, Any]:
        """
        Serializable state for storing between requests. The credential is not included.
        """
        return {
            "state": self.state.value,
            "variant": self.variant.value if self.variant else None,
            "job_description": self.job_description,
        }

    @classmethod
    def restore(
        cls,
        snapshot: Optional[Dict[str, Any]],
        analyze: Callable[[Optional[str], str], Any],
        on_success: Optional[Callable[[Any, Optional[str]], Any]] = None,
        credential: str = "",
    ) -> "CredentialRecoveryFlow":
        """
        Rebuild a flow from snapshot(). In-flight states come back as IDLE.
        """
        flow = cls(analyze, on_success=on_success, credential=credential)
        if not snapshot:
            return flow

        try:
            state = RecoveryState(snapshot.get("state"))
            variant = ModalVariant(snapshot["variant"]) if snapshot.get("variant") else None
        except ValueError:
            logger.warning("Ignoring unreadable recovery snapshot: %r", snapshot)
            return flow

        if state == RecoveryState.AWAITING_CREDENTIAL and variant is not None:
            flow.state = state
            flow.variant = variant
            flow.job_description = snapshot.get("job_description")
        return flow
