"""HTTP entrypoint — builds state from the environment and serves the API."""

import uvicorn

from slack_bridge.adapters.web.server import create_app
from slack_bridge.config import AppConfig
from slack_bridge.server.state import AppState


def main():
    state = AppState(AppConfig.from_env())
    uvicorn.run(create_app(state), host="0.0.0.0", port=state.config.port, log_level="info")


if __name__ == "__main__":
    main()
