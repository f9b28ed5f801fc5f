"""Remote branch pruning tool.

Features:
- List every branch on a remote
- Delete all of them except a protected branch
- Dry-run preview of what would be deleted
- Confirmation prompt, skippable with --force
"""

__version__ = "0.1.0"
