"""
Task subsystem.

Components:
- task_models.py: data structures (ScheduledTask, TaskInfo, TaskType)
- task_scheduler.py: loop-timer scheduler + handler/storage registries
"""
