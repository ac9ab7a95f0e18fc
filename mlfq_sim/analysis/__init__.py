"""Analysis utilities for post-run auditing."""

from .audit import build_audit_report

__all__ = ["build_audit_report"]
