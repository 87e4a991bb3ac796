from slack_bridge.adapters.web.server import create_app, get_state

__all__ = ["create_app", "get_state"]
