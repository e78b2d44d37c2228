"""Application services: submission polling, backups and form validation."""

from promodesk.services.backup_service import BackupService
from promodesk.services.submission_poller import SubmissionPoller

__all__ = ["BackupService", "SubmissionPoller"]
