"""Unit tests for insight tasks.

Tests:
- refresh_user_insights: regenerates and caches one user's insights
"""

from unittest.mock import patch

import pytest

from focusforge.services.insight_service import DEFAULT_INSIGHTS
from focusforge.tasks.insight_tasks import refresh_user_insights


class TestRefreshUserInsights:
    """Tests for the post-session insight refresh task."""

    @pytest.mark.unit
    def test_refreshes(self) -> None:
        with patch("focusforge.tasks.insight_tasks.InsightService") as MockInsightService:
            MockInsightService.return_value.refresh_insights.return_value = DEFAULT_INSIGHTS

            result = refresh_user_insights("user-1")

        assert result == {"user_id": "user-1", "source": "fallback"}
        MockInsightService.return_value.refresh_insights.assert_called_once_with("user-1")

    @pytest.mark.unit
    def test_retries_on_storage_error(self) -> None:
        """Called directly, self.retry() re-raises the original error."""
        with patch("focusforge.tasks.insight_tasks.InsightService") as MockInsightService:
            MockInsightService.return_value.refresh_insights.side_effect = ConnectionError("db")

            with pytest.raises(ConnectionError, match="db"):
                refresh_user_insights("user-1")

    @pytest.mark.unit
    def test_registered_name(self) -> None:
        assert refresh_user_insights.name == "focusforge.tasks.insight_tasks.refresh_user_insights"
