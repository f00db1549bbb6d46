from skycast.exceptions.base import SkyCastError


class JobSchedulingError(SkyCastError):
    """Exception raised when a job cannot be scheduled, cancelled or the scheduler fails."""

    pass
