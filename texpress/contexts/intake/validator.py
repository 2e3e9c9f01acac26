"""
Input validation for resume markup.

Every check is independent and side-effect free. validate_input() runs all of
them and returns a report; ensure_valid() raises InputValidationError with the
first violation as the reported reason.

Checks, in report order:
    size       - markup byte ceiling and group-count ("too complex") ceiling
    size       - derived plain-text ceiling
    balance    - unescaped '{' count must equal unescaped '}' count
    dangerous  - blocklisted commands anywhere in the markup (case-insensitive)
    filename   - alphanumeric/dash/underscore, bounded length
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from omegaconf import DictConfig

from texpress.contexts.intake.exceptions import InputValidationError
from texpress.contexts.intake.logger import log_validation_result, log_validation_start
from texpress.utils.latex_parsing_tools import to_plaintext
from texpress.utils.settings import get_settings
from texpress.utils.text_processing import count_unescaped


class ViolationKind:
    """Enum-like class for validation violation kinds"""

    SIZE = "size"
    BALANCE = "balance"
    DANGEROUS_COMMAND = "dangerous_command"
    FILENAME = "filename"


@dataclass(frozen=True)
class Violation:
    """
    One failed validation check.

    Attributes:
        kind: ViolationKind constant
        message: Human-readable reason
        detail: Optional offending value (command names, counts, filename)
    """

    kind: str
    message: str
    detail: Optional[str] = None


@dataclass
class ValidationReport:
    """Outcome of validating one input. Violations keep check order."""

    violations: List[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def first_violation(self) -> Optional[Violation]:
        return self.violations[0] if self.violations else None


def _validation_settings(settings: Optional[DictConfig]) -> DictConfig:
    return settings if settings is not None else get_settings().validation


def check_markup_size(markup: str, settings: Optional[DictConfig] = None) -> Optional[Violation]:
    """Reject markup above the byte ceiling or with too many groups."""
    settings = _validation_settings(settings)

    size = len(markup.encode("utf-8"))
    if size > settings.max_markup_bytes:
        return Violation(
            ViolationKind.SIZE,
            f"Markup too large: {size} bytes (limit {settings.max_markup_bytes})",
            detail=str(size),
        )

    groups = count_unescaped(markup, "{")
    if groups > settings.max_group_markers:
        return Violation(
            ViolationKind.SIZE,
            f"Markup too complex: {groups} groups (limit {settings.max_group_markers})",
            detail=str(groups),
        )
    return None


def check_text_size(text: str, settings: Optional[DictConfig] = None) -> Optional[Violation]:
    """Reject plain text above the text byte ceiling."""
    settings = _validation_settings(settings)

    size = len(text.encode("utf-8"))
    if size > settings.max_text_bytes:
        return Violation(
            ViolationKind.SIZE,
            f"Resume text too large: {size} bytes (limit {settings.max_text_bytes})",
            detail=str(size),
        )
    return None


def check_derived_text_size(
    markup: str, settings: Optional[DictConfig] = None
) -> Optional[Violation]:
    """Apply the plain-text ceiling to the text the markup would render."""
    settings = _validation_settings(settings)

    # Plain text is never longer than its markup
    if len(markup.encode("utf-8")) <= settings.max_text_bytes:
        return None
    return check_text_size(to_plaintext(markup), settings)


def check_balance(markup: str) -> Optional[Violation]:
    """
    Compare unescaped opening and closing braces.

    Example:
        >>> check_balance("{" * 10).kind
        'balance'
    """
    opening = count_unescaped(markup, "{")
    closing = count_unescaped(markup, "}")
    if opening != closing:
        return Violation(
            ViolationKind.BALANCE,
            f"Unbalanced braces: {opening} opening vs {closing} closing",
            detail=f"{opening}/{closing}",
        )
    return None


def find_dangerous_commands(markup: str, settings: Optional[DictConfig] = None) -> List[str]:
    """Blocklisted commands present in markup, in blocklist order."""
    settings = _validation_settings(settings)
    lowered = markup.lower()
    return [command for command in settings.dangerous_commands if command.lower() in lowered]


def check_dangerous_commands(
    markup: str, settings: Optional[DictConfig] = None
) -> Optional[Violation]:
    """Reject markup containing any blocklisted command."""
    found = find_dangerous_commands(markup, settings)
    if found:
        return Violation(
            ViolationKind.DANGEROUS_COMMAND,
            f"Potentially dangerous command detected: {found[0]}",
            detail=", ".join(found),
        )
    return None


def check_filename(filename: str, settings: Optional[DictConfig] = None) -> Optional[Violation]:
    """
    Restrict output filenames to a safe charset and length.

    Example:
        >>> check_filename("resume_2024-v2") is None
        True
        >>> check_filename("../etc/passwd").kind
        'filename'
    """
    settings = _validation_settings(settings)
    if not re.fullmatch(settings.filename_pattern, filename):
        return Violation(
            ViolationKind.FILENAME,
            "Invalid filename: use 1-50 letters, digits, dashes or underscores",
            detail=filename,
        )
    return None


def validate_input(
    markup: str, filename: Optional[str] = None, settings: Optional[DictConfig] = None
) -> ValidationReport:
    """
    Run every check against markup and an optional filename.

    Args:
        markup: Raw resume markup
        filename: Requested output name (without extension), optional
        settings: validation settings node (default: get_settings().validation)

    Returns:
        ValidationReport with violations in check order
    """
    settings = _validation_settings(settings)
    log_validation_start(len(markup.encode("utf-8")), filename)

    checks = [
        check_markup_size(markup, settings),
        check_derived_text_size(markup, settings),
        check_balance(markup),
        check_dangerous_commands(markup, settings),
    ]
    if filename is not None:
        checks.append(check_filename(filename, settings))

    report = ValidationReport([violation for violation in checks if violation is not None])
    log_validation_result(report)
    return report


def ensure_valid(
    markup: str, filename: Optional[str] = None, settings: Optional[DictConfig] = None
) -> None:
    """
    Raise InputValidationError unless markup and filename pass every check.

    Raises:
        InputValidationError: Carrying the first violation and all others
    """
    report = validate_input(markup, filename, settings)
    if not report.is_valid:
        raise InputValidationError(report.violations)


def validate_resume_text(text: str, settings: Optional[DictConfig] = None) -> ValidationReport:
    """Check plain resume text (not markup) against the text ceiling."""
    violation = check_text_size(text, settings)
    report = ValidationReport([violation] if violation else [])
    log_validation_result(report)
    return report
