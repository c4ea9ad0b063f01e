"""
Storage subsystem.

Components:
- errors.py: StorageUnavailable / MalformedData
- kv_store.py: SQLite-backed key-value store
- persistence.py: task list blob under one fixed key
"""
