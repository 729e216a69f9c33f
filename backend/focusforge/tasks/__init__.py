"""Background tasks for FocusForge."""

from focusforge.tasks.insight_tasks import refresh_user_insights

__all__ = ["refresh_user_insights"]
