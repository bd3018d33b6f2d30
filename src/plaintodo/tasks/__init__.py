"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Started/Finished status, priority helpers)
- task_parser.py: todo.txt record parsing and canonical rendering
- task_store.py: file-backed store (task file + optional done file)
"""
