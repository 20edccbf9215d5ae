"""Mapping of rejected tree operations to HTTP responses."""

from category_admin.core.outcome import Rejected, RejectionReason

REJECTION_STATUS: dict[RejectionReason, int] = {
    RejectionReason.NOT_FOUND: 404,
    RejectionReason.DUPLICATE_NAME: 409,
    RejectionReason.HAS_CHILDREN: 409,
    RejectionReason.SELF_PARENT: 422,
    RejectionReason.PARENT_NOT_FOUND: 422,
    RejectionReason.CYCLIC_MOVE: 422,
    RejectionReason.INCOMPLETE_REORDER: 422,
}


class RejectionError(Exception):
    """Raised by routes to turn a Rejected outcome into an error response."""

    def __init__(self, rejection: Rejected) -> None:
        self.rejection = rejection
        self.status_code = REJECTION_STATUS.get(rejection.reason, 422)
        super().__init__(rejection.detail or rejection.reason.value)
