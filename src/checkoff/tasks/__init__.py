"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskFilter, TaskStats)
- task_codec.py: JSON blob encoding of the task list
- task_ids.py: per-process unique id generator
- task_store.py: in-memory authoritative state + mutations + derived views
- task_writer.py: fire-and-forget writers that push snapshots to storage
"""
