from history.trends import calculate_trend, trend_from_history, trend_history

__all__ = ["calculate_trend", "trend_from_history", "trend_history"]
