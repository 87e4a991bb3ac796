from slack_bridge.infrastructure.retry import backoff_delays, retry

__all__ = ["backoff_delays", "retry"]
