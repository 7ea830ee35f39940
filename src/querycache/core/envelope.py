"""Result envelope for mutations and failed reads.

Every mutation returns a :class:`ResultEnvelope`; failed reads return the
failure variant in place of data, so callers check ``status`` (or
:func:`is_failure`) before using a result.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from querycache.shared.constants import EnvelopeFields
from querycache.shared.errors import DatabaseError


@dataclass(frozen=True)
class ResultEnvelope:
    """Uniform status record.

    Attributes:
        status: True on success
        message: Failure message, empty on success
        affected: Rows changed by a successful statement
        insert_id: Generated identifier of a successful insert
        error_code: Driver error code of a failure

    Example:
        >>> ResultEnvelope.success(affected=1, insert_id=42).project("insert_id")
        42
        >>> ResultEnvelope.failure("Empty input").status
        False
    """

    status: bool
    message: str = ""
    affected: int | None = None
    insert_id: Any = None
    error_code: int | None = None

    def __post_init__(self) -> None:
        """Enforce the failure invariant.

        Raises:
            ValueError: If a failure has no message or carries data fields
        """
        if self.status:
            return
        if not self.message:
            msg = "failure envelope requires a non-empty message"
            raise ValueError(msg)
        if self.affected is not None or self.insert_id is not None:
            msg = "failure envelope must not carry affected/insert_id"
            raise ValueError(msg)

    @classmethod
    def success(cls, affected: int | None, insert_id: Any = None) -> ResultEnvelope:
        return cls(status=True, affected=affected, insert_id=insert_id)

    @classmethod
    def failure(cls, message: str, error_code: int | None = None) -> ResultEnvelope:
        return cls(status=False, message=message, error_code=error_code)

    @classmethod
    def from_error(cls, error: DatabaseError) -> ResultEnvelope:
        """Build the failure variant from a database error."""
        return cls.failure(error.message or str(error), error.error_code)

    def project(self, field: str) -> Any:
        """Return a single field by name; unknown or unset fields yield None."""
        if field not in EnvelopeFields.ALL:
            return None
        return getattr(self, field)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def is_failure(value: Any) -> bool:
    """Return True if ``value`` is a failure envelope."""
    return isinstance(value, ResultEnvelope) and not value.status


__all__ = ["ResultEnvelope", "is_failure"]
