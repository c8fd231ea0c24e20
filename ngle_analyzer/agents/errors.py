"""
errors.py

Error types shared by the LLM agents and the sentence analyzer.

Agents translate provider SDK exceptions into `ServiceCallError`, which carries
an explicit `FailureKind`. The analyzer decides retries and the terminal error
to surface by matching on that kind instead of inspecting message text.

Terminal errors raised to callers carry user-facing Spanish messages.
"""

from enum import Enum
from typing import Optional


class FailureKind(str, Enum):
    """
    Category of a failed call to the text completion service.

    `NETWORK` covers transient transport failures and is retried;
    `CONNECTIVITY` covers messages that only say the network is down and
    fails at once. Both end as `NetworkUnreachableError`.
    """

    NETWORK = "network"
    RPC = "rpc"
    TIMEOUT = "timeout"
    SERVER = "server"
    CONNECTIVITY = "connectivity"
    CREDENTIAL = "credential"
    OTHER = "other"

    @property
    def retryable(self) -> bool:
        return self in _RETRYABLE_KINDS

    @classmethod
    def from_message(
        cls, message: str, status_code: Optional[int] = None
    ) -> "FailureKind":
        """
        Classifies a failure from its message and optional status code.

        Used only for exceptions whose type the agent does not recognise.
        Keyword matching is a best-effort fallback; the typed SDK exceptions
        handled by each agent take precedence.

        Args:
            message (str): The error message (any case).
            status_code (Optional[int]): HTTP-like status code, if known.

        Returns:
            FailureKind: The inferred category.
        """
        text = (message or "").lower()
        if "api_key_invalid" in text or "[400]" in text or status_code == 400:
            return cls.CREDENTIAL
        if "rpc failed" in text:
            return cls.RPC
        if any(marker in text for marker in _TRANSPORT_MARKERS):
            return cls.NETWORK
        if "timeout" in text or "timed out" in text:
            return cls.TIMEOUT
        if status_code is not None and status_code >= 500:
            return cls.SERVER
        if mentions_network(text):
            return cls.CONNECTIVITY
        return cls.OTHER


_RETRYABLE_KINDS = frozenset(
    {FailureKind.NETWORK, FailureKind.RPC, FailureKind.TIMEOUT, FailureKind.SERVER}
)

_TRANSPORT_MARKERS = ("xhr error", "fetch failed", "network error")

_CONNECTIVITY_MARKERS = ("fetch failed", "inet", "network")


def mentions_network(message: str) -> bool:
    """True if an error message points at lost connectivity (any case)."""
    text = (message or "").lower()
    return any(marker in text for marker in _CONNECTIVITY_MARKERS)


class ServiceCallError(Exception):
    """
    A single failed call to the text completion service.

    Attributes:
        kind (FailureKind): Category set by the agent that made the call.
        status_code (Optional[int]): HTTP-like status code, when the provider reports one.
    """

    def __init__(
        self, message: str, kind: FailureKind, status_code: Optional[int] = None
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code

    @property
    def retryable(self) -> bool:
        return self.kind.retryable

    def __repr__(self):
        return (
            f"ServiceCallError(kind={self.kind.value!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )


class AnalyzerError(Exception):
    """Base class for terminal errors surfaced by `SentenceAnalyzer.analyze`."""


class ConfigurationError(AnalyzerError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "La clave API del servicio de análisis no ha sido configurada "
            "correctamente en el entorno de la aplicación."
        )


class InvalidCredentialError(AnalyzerError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "La clave API del servicio de análisis no es válida o ha expirado. "
            "Por favor, verifica la configuración."
        )


class NetworkUnreachableError(AnalyzerError):
    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "Error de red al contactar el servicio de análisis. "
            "Verifica tu conexión a internet e inténtalo de nuevo."
        )


class RetriesExhaustedError(AnalyzerError):
    """
    Generic terminal failure wrapping the last underlying error.

    Attributes:
        attempts (int): Number of attempts made before giving up.
        last_error (BaseException): The failure of the final attempt.
    """

    def __init__(self, attempts: int, last_error: BaseException):
        self.attempts = attempts
        self.last_error = last_error
        detail = getattr(last_error, "message", None) or str(last_error)
        super().__init__(
            f"Error al procesar la solicitud después de {attempts} intentos: {detail}"
        )
