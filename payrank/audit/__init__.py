"""Audit logging package."""

from payrank.audit.logger import AuditLogger, create_correlation_id
from payrank.config.logging_config import configure_logging

__all__ = ["AuditLogger", "configure_logging", "create_correlation_id"]
