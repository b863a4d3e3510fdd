"""
linux_notifier_core package.

Holds the process-level helpers of the notification daemon runtime.
"""

__all__ = [
    "logger",
]
