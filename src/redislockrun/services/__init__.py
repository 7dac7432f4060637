"""External collaborators used by the runner."""

from .process import ProcessExecutor

__all__ = ["ProcessExecutor"]
