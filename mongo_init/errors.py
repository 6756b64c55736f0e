"""
Errors raised while provisioning MongoDB.
"""
from typing import Optional


class ProvisionError(RuntimeError):
    """A provisioning step failed; the driver error is kept as ``__cause__``."""

    def __init__(self, step: str, cause: Optional[BaseException] = None):
        self.step = step
        message = f"{step} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class DatabaseNotReadyError(ProvisionError):
    """MongoDB did not answer a ping before the readiness timeout."""

    def __init__(self, attempts: int, cause: Optional[BaseException] = None):
        self.attempts = attempts
        super().__init__("readiness", cause)
