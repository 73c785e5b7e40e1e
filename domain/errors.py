# domain/errors.py - Error taxonomy shared by adapters, use cases and the API
from typing import Dict, List, Optional


class DirectoryError(Exception):
    """Base class for every error the directory core raises"""
    status_code = 500


class NotFound(DirectoryError):
    """Entity or document does not exist"""
    status_code = 404


class Conflict(DirectoryError):
    """Dedup filter already holds the business key"""
    status_code = 409


class InvalidPrecondition(DirectoryError):
    """Input or stored data cannot satisfy the operation"""
    status_code = 400


class UpstreamFailure(DirectoryError):
    """Store transport error or external lookup failure"""
    status_code = 500


class PartialWriteError(UpstreamFailure):
    """
    Some writes of a best-effort batch failed.

    The writes listed in `succeeded` are NOT rolled back, so the record, set,
    rank and filter representations may disagree until repaired by hand.
    """

    def __init__(self, operation: str, failed: Dict[str, BaseException],
                 succeeded: Optional[List[str]] = None):
        self.operation = operation
        self.failed = failed
        self.succeeded = succeeded or []
        labels = ", ".join(sorted(failed))
        super().__init__(f"{operation}: {len(failed)} write(s) failed ({labels})")
