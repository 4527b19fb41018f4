"""
Validation verdict aggregation.

Combines the three independent project checks into one verdict:

    scam       passed == no scam reports / suspicious patterns
    sanctions  passed == no sanctions match
    audit      passed == audit verified by a recognized firm

Each check may carry a manual override; the effective value of a check is
the human-entered one whenever ``manual_override`` is set.

Policy:
    overall_passed = scam.effective AND NOT sanctions_detected
    risk_level     = high    if sanctions detected
                     medium  if scam check failed or audit unverified
                     low     otherwise

Audit failure alone never blocks a listing; it only raises the risk level.
Everything here is pure; persistence belongs to the validation service.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from app.errors import InvalidInput

CHECK_NAMES = ("scam", "sanctions", "audit")


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class CheckResult:
    """One sub-check: the automated outcome plus an optional human override."""

    passed: bool
    details: str = ""
    manual_override: bool = False
    manual_passed: Optional[bool] = None
    manual_notes: Optional[str] = None

    @property
    def effective_passed(self) -> bool:
        if self.manual_override and self.manual_passed is not None:
            return self.manual_passed
        return self.passed

    def overridden(self, passed: bool, notes: Optional[str] = None) -> "CheckResult":
        return replace(self, manual_override=True, manual_passed=passed, manual_notes=notes)


@dataclass(frozen=True)
class Verdict:
    risk_level: RiskLevel
    overall_passed: bool


@dataclass(frozen=True)
class ValidationState:
    """All three checks together with the review stamp."""

    scam: CheckResult
    sanctions: CheckResult
    audit: CheckResult
    manually_reviewed: bool = False
    reviewer_id: Optional[str] = None
    reviewed_at: Optional[datetime] = None

    @property
    def verdict(self) -> Verdict:
        return aggregate(self.scam, self.sanctions, self.audit)

    def check(self, name: str) -> CheckResult:
        if name not in CHECK_NAMES:
            raise InvalidInput(f"Unknown check '{name}'; expected one of {', '.join(CHECK_NAMES)}")
        return getattr(self, name)


def aggregate(scam: CheckResult, sanctions: CheckResult, audit: CheckResult) -> Verdict:
    """Combine the three checks into a verdict.

    Total over well-typed inputs and free of side effects, so repeated calls
    with equal inputs always return equal verdicts.
    """
    sanctions_detected = not sanctions.effective_passed
    overall_passed = scam.effective_passed and not sanctions_detected

    if sanctions_detected:
        risk_level = RiskLevel.HIGH
    elif not scam.effective_passed or not audit.effective_passed:
        risk_level = RiskLevel.MEDIUM
    else:
        risk_level = RiskLevel.LOW

    return Verdict(risk_level=risk_level, overall_passed=overall_passed)


def apply_override(
    state: ValidationState,
    check: str,
    passed: bool,
    notes: Optional[str],
    reviewer_id: str,
    now: Optional[datetime] = None,
) -> ValidationState:
    """Record a human decision on one check and stamp the review."""
    current = state.check(check)
    return replace(
        state,
        **{check: current.overridden(passed, notes)},
        manually_reviewed=True,
        reviewer_id=reviewer_id,
        reviewed_at=now or datetime.now(timezone.utc),
    )


def refresh_automated(state: ValidationState, scam: CheckResult, sanctions: CheckResult, audit: CheckResult) -> ValidationState:
    """Swap in fresh automated results while keeping any manual overrides."""

    def _merge(previous: CheckResult, fresh: CheckResult) -> CheckResult:
        if not previous.manual_override:
            return fresh
        return replace(
            fresh,
            manual_override=True,
            manual_passed=previous.manual_passed,
            manual_notes=previous.manual_notes,
        )

    return replace(
        state,
        scam=_merge(state.scam, scam),
        sanctions=_merge(state.sanctions, sanctions),
        audit=_merge(state.audit, audit),
    )
