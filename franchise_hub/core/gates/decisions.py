"""
Gate decisions.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GateDecision:
    """
    Outcome of one gate.

    Attributes:
        allowed: Request may proceed
        redirect_to: Client route the user must finish first
        flag: Machine-readable key set to true in the 403 body
        message: Human-readable reason
    """
    allowed: bool
    redirect_to: str | None = None
    flag: str | None = None
    message: str | None = None

    @classmethod
    def allow(cls) -> "GateDecision":
        return cls(allowed=True)

    @classmethod
    def redirect(cls, redirect_to: str, flag: str, message: str) -> "GateDecision":
        return cls(allowed=False, redirect_to=redirect_to, flag=flag, message=message)

    def to_dict(self) -> dict:
        return {"message": self.message, self.flag: True, "redirect_to": self.redirect_to}


class GateRedirectRequired(Exception):
    """Raised for non-API requests; rendered as a 302 to `decision.redirect_to`."""

    def __init__(self, decision: GateDecision):
        self.decision = decision
        super().__init__(decision.message)
