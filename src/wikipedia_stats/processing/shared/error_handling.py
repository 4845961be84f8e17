"""
Error taxonomy and standardized error reporting for the dump statistics run.

Every parsing and decompression failure is fatal to the whole run: there is
no per-page or per-file recovery. Pages dropped for lacking a title, text or
year are not errors and never reach this module.
"""

import logging
import traceback
from datetime import datetime, timezone
from typing import Dict, Any, Optional


class WikiStatsError(Exception):
    """Base class for all fatal errors of a statistics run."""

    kind = "WikiStatsError"

    def __init__(self, message: str, file_name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.file_name = file_name

    def __str__(self) -> str:
        if self.file_name:
            return f"{self.message} (file: {self.file_name})"
        return self.message


class UnreadableFile(WikiStatsError):
    kind = "UnreadableFile"


class CorruptCompressedStream(WikiStatsError):
    kind = "CorruptCompressedStream"


class MalformedXml(WikiStatsError):
    kind = "MalformedXml"


class MissingSizeAttribute(WikiStatsError):
    kind = "MissingSizeAttribute"


class MalformedTimestamp(WikiStatsError):
    kind = "MalformedTimestamp"


class ProcessingCancelled(WikiStatsError):
    """Raised inside a worker once the run has been cancelled."""

    kind = "ProcessingCancelled"


class DownloadError(WikiStatsError):
    kind = "DownloadError"


class ReportWriteError(WikiStatsError):
    kind = "ReportWriteError"


class ErrorHandler:
    """
    Centralized error handling with stats tracking and context logging
    """

    def __init__(
        self,
        logger: logging.Logger,
        stats: Optional[Dict[str, Any]] = None,
        debug: bool = False
    ):
        """
        Args:
            logger: Configured logger instance
            stats: Optional stats dictionary to update
            debug: Enable detailed error reporting
        """
        self.logger = logger
        self.stats = stats if stats is not None else {}
        self.debug = debug

        self.stats.setdefault('error_count', 0)
        self.stats.setdefault('error_types', {})
        self.stats.setdefault('last_error', None)

    def handle(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Log an exception with its context and return updated stats.

        The caller stays responsible for re-raising; this never swallows.

        Args:
            error: Exception to handle
            context: Additional context about the error

        Returns:
            Updated stats dictionary
        """
        error_type = error_kind(error)
        error_details = self._build_error_details(error, context, error_type)

        self._update_stats(error_type, error_details)
        self._log_error(error, error_details)
        return self.stats

    def _build_error_details(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]],
        error_type: str
    ) -> Dict[str, Any]:
        return {
            'type': error_type,
            'message': str(error),
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'context': context,
            'traceback': traceback.format_exc() if self.debug else None
        }

    def _update_stats(self, error_type: str, error_details: Dict[str, Any]) -> None:
        self.stats['error_count'] += 1
        self.stats['error_types'][error_type] = self.stats['error_types'].get(error_type, 0) + 1
        self.stats['last_error'] = error_details

    def _log_error(self, error: Exception, details: Dict[str, Any]) -> None:
        if isinstance(error, (KeyboardInterrupt, SystemExit)):
            self.logger.critical("Process interrupted: %s", details)
        else:
            log_method = self.logger.error if not self.debug else self.logger.exception
            log_method("Error occurred: %s", details)

    @classmethod
    def create_context(
        cls,
        component: str,
        item_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create standardized error context

        Args:
            component: Which component failed
            item_id: ID of item being processed (a file name here)

        Returns:
            Context dictionary
        """
        return {
            'component': component,
            'item_id': item_id
        }


def error_kind(error: BaseException) -> str:
    """Name of the failure kind shown to users."""
    return getattr(error, 'kind', None) or type(error).__name__
