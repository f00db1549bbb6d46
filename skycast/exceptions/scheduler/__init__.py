from skycast.exceptions.scheduler.job_scheduling_error import JobSchedulingError

__all__ = ["JobSchedulingError"]
