class SchedulingError(Exception):
    """Base error for every failure the scheduling core reports."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(SchedulingError):
    """Malformed rule, interval, time-of-day or range input."""

    status_code = 400


class ForbiddenError(SchedulingError):
    status_code = 403


class NotFoundError(SchedulingError):
    status_code = 404


class ConflictError(SchedulingError):
    """A proposed time range collides with an existing assignment or window."""

    status_code = 409


class StateError(SchedulingError):
    """The action is not allowed for the assignment's current status."""

    status_code = 409
