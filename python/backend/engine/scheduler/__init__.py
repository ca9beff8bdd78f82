from backend.engine.scheduler.scheduler import ScheduledTask, Scheduler

__all__ = ["ScheduledTask", "Scheduler"]
