"""Error types shared by the engine, the pipeline and the web layer."""

from typing import Any


class KineticError(Exception):
    """Base class for all application errors.

    Carries a machine-readable ``code`` and the HTTP status the web layer
    should answer with.
    """

    code = "KINETIC_ERROR"
    status_code = 500

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "status_code": self.status_code,
            "context": self.context,
        }


class ValidationError(KineticError):
    """Malformed or missing input, detected before any external call."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str,
        stage: str | None = None,
        fields: dict[str, list[str]] | None = None,
    ):
        super().__init__(message, {"stage": stage, "fields": fields or {}})
        self.stage = stage
        self.fields = fields or {}

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class ProviderError(KineticError):
    """An external provider call failed or timed out during a pipeline stage."""

    code = "PROVIDER_ERROR"
    status_code = 502

    def __init__(
        self,
        stage: str,
        provider: str,
        message: str,
        cause: BaseException | None = None,
    ):
        super().__init__(message, {"stage": stage, "provider": provider})
        self.stage = stage
        self.provider = provider
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.stage}] {self.provider}: {self.message}"


class NotFoundError(KineticError):
    """A project, scene or layer id does not exist."""

    code = "NOT_FOUND"
    status_code = 404

    def __init__(self, resource: str, resource_id: str | None = None):
        message = (
            f"{resource} with id {resource_id} not found"
            if resource_id
            else f"{resource} not found"
        )
        super().__init__(message, {"resource": resource, "id": resource_id})
        self.resource = resource
        self.resource_id = resource_id


class DegradedFrameError(KineticError):
    """A single layer failed to evaluate.

    Never leaves the frame evaluation engine: the layer is replaced by a
    hidden state and its siblings are still evaluated.
    """

    code = "DEGRADED_FRAME"

    def __init__(self, layer_id: str, reason: str):
        super().__init__(f"Layer {layer_id} degraded: {reason}", {"layer_id": layer_id})
        self.layer_id = layer_id
        self.reason = reason
