"""
Result types for proof fetching and verification.

TrieProofManager reports RPC failures and malformed proofs through a
Result instead of raising, so a caller working through many slots or
accounts can keep going and look at what failed afterwards. `unwrap()`
turns a failed Result back into its original exception.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorSeverity(Enum):
    WARNING = "warning"  # Data is usable
    ERROR = "error"  # This proof is unavailable
    CRITICAL = "critical"  # Proof data is malformed


@dataclass
class ProcessingError:
    """
    One failure, with where it happened.

    Attributes:
        source: Stage that failed ("storage_proof", "state_proof",
            "verification")
        message: Human-readable description
        severity: See ErrorSeverity
        context: Address, key, block number and the like
        exception: The exception behind the failure, if any
    """

    source: str
    message: str
    severity: ErrorSeverity
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None


@dataclass
class Result(Generic[T]):
    """Outcome of an operation: data on success, errors otherwise."""

    success: bool
    data: Optional[T] = None
    errors: List[ProcessingError] = field(default_factory=list)

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ProcessingError) -> "Result[T]":
        return cls(success=False, errors=[error])

    @classmethod
    def fail_with_message(
        cls,
        source: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> "Result[T]":
        return cls.fail(
            ProcessingError(
                source=source,
                message=message,
                severity=severity,
                context=context or {},
                exception=exception,
            )
        )

    def add_warning(
        self,
        source: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> "Result[T]":
        self.errors.append(
            ProcessingError(
                source=source,
                message=message,
                severity=ErrorSeverity.WARNING,
                context=context or {},
            )
        )
        return self

    def unwrap(self) -> T:
        """Return the data, raising the recorded failure if there is one."""
        if self.success:
            return self.data
        first = self.errors[0] if self.errors else None
        if first is not None and first.exception is not None:
            raise first.exception
        raise RuntimeError(
            first.message if first else "Result failed without an error"
        )

    def has_warnings(self) -> bool:
        return any(e.severity is ErrorSeverity.WARNING for e in self.errors)
