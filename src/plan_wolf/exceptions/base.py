"""Root of the Plan Wolf error hierarchy."""

from typing import Dict, Optional


class PlanWolfError(Exception):
    """An error Plan Wolf raises on purpose.

    ``plan-wolf run`` turns it into a one-line message and exit code 2,
    so ``details`` should carry whatever the user needs to fix the cause
    (the offending path, config key or command).
    """

    def __init__(self, message: str, details: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})

    def __str__(self) -> str:
        if not self.details:
            return self.message
        context = ", ".join(f"{key}={value}" for key, value in self.details.items())
        return f"{self.message} ({context})"
