"""Architectural rule validators."""

from validator.engine import Validator
from validator.verdict import should_fail
from validator.violations import Violation, ViolationKind, sort_violations

__all__ = ["Validator", "Violation", "ViolationKind", "should_fail", "sort_violations"]
