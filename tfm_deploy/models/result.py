"""Operation result models"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Generic, List, Optional, Any, TypeVar

from ..constants import ErrorCode
from .module import ModuleDescriptor

T = TypeVar('T')


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ApiOutcome(Enum):
    """Outcome tag of a single registry call"""
    OK = "ok"
    NOT_FOUND = "not_found"
    ERROR = "error"


class OperationStatus(Enum):
    """Terminal status of a deploy or delete operation"""
    SUCCESS = "success"
    FAILED = "failed"
    ERROR = "error"
    IN_PROGRESS = "in_progress"


@dataclass
class ErrorDetail:
    """Detailed error information"""

    code: str
    message: str
    context: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


@dataclass
class ApiResult(Generic[T]):
    """Result of a registry client call

    Exactly one of three outcomes: the call succeeded (``value`` may hold the
    decoded resource), the resource does not exist, or the call failed
    (``error`` describes why).
    """

    outcome: ApiOutcome
    value: Optional[T] = None
    status_code: Optional[int] = None
    error: Optional[ErrorDetail] = None

    @classmethod
    def ok(cls, value: Optional[T] = None, status_code: Optional[int] = None) -> 'ApiResult[T]':
        return cls(ApiOutcome.OK, value=value, status_code=status_code)

    @classmethod
    def not_found(cls, status_code: int = 404) -> 'ApiResult[T]':
        return cls(ApiOutcome.NOT_FOUND, status_code=status_code)

    @classmethod
    def failed(cls, message: str,
               status_code: Optional[int] = None,
               code: str = ErrorCode.API_ERROR,
               **context) -> 'ApiResult[T]':
        return cls(
            ApiOutcome.ERROR,
            status_code=status_code,
            error=ErrorDetail(code=code, message=message, context=context)
        )

    @property
    def is_ok(self) -> bool:
        return self.outcome == ApiOutcome.OK

    @property
    def is_not_found(self) -> bool:
        return self.outcome == ApiOutcome.NOT_FOUND

    @property
    def is_error(self) -> bool:
        return self.outcome == ApiOutcome.ERROR

    def unwrap(self) -> Optional[T]:
        """Return the value, treating absence as None

        Raises:
            RegistryApiError: If the call failed
        """
        from ..api.exceptions import RegistryApiError

        if self.is_error:
            message = self.error.message if self.error else "Registry call failed"
            raise RegistryApiError(message, self.status_code)
        return self.value


@dataclass
class StepRecord:
    """One executed step of a workflow"""

    name: str
    outcome: str
    detail: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"name": self.name, "outcome": self.outcome}
        if self.detail:
            data["detail"] = self.detail
        return data


@dataclass
class Result:
    """Base result class"""

    status: OperationStatus = OperationStatus.IN_PROGRESS
    message: str = ""
    descriptor: Optional[ModuleDescriptor] = None
    steps: List[StepRecord] = field(default_factory=list)
    errors: List[ErrorDetail] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    start_time: datetime = field(default_factory=_utcnow)
    end_time: Optional[datetime] = None

    @property
    def is_success(self) -> bool:
        """Check if operation was successful"""
        return self.status == OperationStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        """Check if operation ended with an expected failure"""
        return self.status == OperationStatus.FAILED

    @property
    def is_error(self) -> bool:
        """Check if operation ended with an unknown error"""
        return self.status == OperationStatus.ERROR

    @property
    def duration(self) -> Optional[float]:
        """Get operation duration in seconds"""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return None

    @property
    def step_names(self) -> List[str]:
        return [step.name for step in self.steps]

    def record_step(self, name: str, api_result: ApiResult) -> None:
        """Append a step from a registry call result"""
        detail = api_result.error.message if api_result.error else None
        self.steps.append(StepRecord(name, api_result.outcome.value, detail))

    def add_error(self, code: str, message: str, **context) -> None:
        """Add an error"""
        self.errors.append(ErrorDetail(code=code, message=message, context=context))

    def add_warning(self, message: str) -> None:
        """Add a warning"""
        self.warnings.append(message)

    def complete(self, status: Optional[OperationStatus] = None, message: str = None) -> None:
        """Mark operation as complete"""
        self.end_time = _utcnow()
        if status:
            self.status = status
        if message is not None:
            self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "status": self.status.value,
            "message": self.message,
            "module": self.descriptor.to_dict() if self.descriptor else None,
            "steps": [s.to_dict() for s in self.steps],
            "errors": [e.to_dict() for e in self.errors],
            "warnings": self.warnings,
            "duration": self.duration
        }


@dataclass
class DeployResult(Result):
    """Result of deploy operation"""

    upload_url: Optional[str] = None
    archive_size: Optional[int] = None
    verified: bool = False
    verify_attempts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        data = super().to_dict()
        data.update({
            "archive_size": self.archive_size,
            "verified": self.verified,
            "verify_attempts": self.verify_attempts,
        })
        return data


@dataclass
class DeleteResult(Result):
    """Result of delete operation"""
    pass
