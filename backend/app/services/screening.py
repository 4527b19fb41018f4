"""Automated project screening — scam, sanctions and audit checks.

Each check looks only at the project's own catalog attributes and returns a
CheckResult; combining them is the aggregator's job (app.validation).
"""

import logging
import re
from typing import Optional
from urllib.parse import urlparse

from app.config import settings
from app.validation import CheckResult

logger = logging.getLogger(__name__)

SCAM_PHRASES = [
    "guaranteed returns", "risk-free", "100% secure", "get rich quick",
    "double your investment", "secret investment", "hidden strategy",
    "exclusive opportunity", "limited time offer", "act now", "instant profit",
]

# Whole phrase, case-insensitive.  \b does not anchor after "%", hence the lookarounds.
_SCAM_PATTERN = re.compile(
    r"(?<!\w)(" + "|".join(re.escape(p) for p in SCAM_PHRASES) + r")(?!\w)",
    re.IGNORECASE,
)

SANCTIONED_TLDS = {
    "ir": "Iran",
    "kp": "North Korea",
    "cu": "Cuba",
    "sy": "Syria",
    "ru": "Russia (partial sanctions)",
}

RECOGNIZED_AUDIT_FIRMS = [
    "certik", "peckshield", "hacken", "quantstamp",
    "slowmist", "chainsecurity", "trailofbits",
    "openzeppelin", "consensys", "mixbytes",
    "solidified", "smartdec", "halborn", "immunefi",
]


def _hostname(website: Optional[str]) -> str:
    if not website:
        return ""
    candidate = website if "://" in website else f"https://{website}"
    try:
        return (urlparse(candidate).hostname or "").lower()
    except ValueError:
        logger.warning("Could not parse website URL %r", website)
        return ""


def check_scam(name: str, description: str, roi: float, roi_threshold: Optional[float] = None) -> CheckResult:
    """Flag suspicious terminology or implausible ROI claims."""
    threshold = settings.SCAM_ROI_THRESHOLD if roi_threshold is None else roi_threshold

    match = _SCAM_PATTERN.search(f"{name or ''} {description or ''}")
    if match:
        return CheckResult(
            passed=False,
            details=f"Suspicious terminology detected: {match.group(0)}",
        )

    if roi is not None and roi > threshold:
        return CheckResult(
            passed=False,
            details=(
                f"Suspiciously high ROI claim: {roi}%. This exceeds typical "
                "market returns and raises red flags."
            ),
        )

    return CheckResult(passed=True, details="No suspicious patterns or reports detected")


def check_sanctions(website: Optional[str]) -> CheckResult:
    """Flag websites hosted under a sanctioned country's TLD."""
    host = _hostname(website)
    for code, country in SANCTIONED_TLDS.items():
        if host.endswith(f".{code}"):
            return CheckResult(
                passed=False,
                details=f"Project website has domain associated with sanctioned country: {country}",
            )
    return CheckResult(passed=True, details="No sanctions detected")


def check_audit(audit_url: Optional[str], audit_document_path: Optional[str]) -> CheckResult:
    """Verify the audit came from a recognized security firm."""
    if not audit_url and not audit_document_path:
        return CheckResult(
            passed=False,
            details="No audit document or URL provided. Manual review recommended.",
        )

    if audit_url:
        lowered = audit_url.lower()
        firm = next((f for f in RECOGNIZED_AUDIT_FIRMS if f in lowered), None)
        if firm:
            return CheckResult(passed=True, details=f"Verified audit from: {firm}")
        return CheckResult(
            passed=False,
            details=(
                "Audit URL provided but not from a recognized security firm. "
                "Manual verification required."
            ),
        )

    # Documents cannot be parsed here; a human has to confirm the auditor.
    return CheckResult(
        passed=False,
        details=(
            "Audit document provided but automated verification is limited. "
            "Manual review required to verify audit credibility."
        ),
    )


def screen_project(project) -> tuple[CheckResult, CheckResult, CheckResult]:
    """Run all three automated checks against a project record."""
    return (
        check_scam(project.name, project.description, project.roi),
        check_sanctions(project.website),
        check_audit(project.audit_url, project.audit_document_path),
    )
