"""
Task subsystem.

Components:
- task_models.py: exit status, per-member failure record, exit classification
- task.py: Task (single-process run protocol) and MemoizedTask (shared runs)
- task_group.py: TaskGroup (concurrent batch run with aggregated failures)
"""
