"""
Exceptions raised by the analysis pipeline.
"""


class AnalysisError(Exception):
    """
    Base class for failures of an analysis request.
    """


class InputError(AnalysisError):
    """
    No resume, or a malformed projection, was supplied. Never retried.
    """


class AuthError(AnalysisError):
    """
    The generation backend rejected the credential (invalid, expired or missing).
    """


class ServiceUnavailable(AnalysisError):
    """
    The generation backend is unreachable or failing for reasons unrelated
    to the credential.
    """


class PersistenceError(Exception):
    """
    The store rejected a write to the analysis history.
    """


class RecoveryStateError(Exception):
    """
    A credential recovery action was attempted from a state that does not allow it.
    """
