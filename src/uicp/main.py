# src/uicp/main.py
from dotenv import load_dotenv
load_dotenv()
import argparse
import asyncio
import logging

from quart import Quart
from quart_cors import cors
import hypercorn.asyncio
from hypercorn.config import Config

from uicp.core.config import APP_CONFIG

# --- Logging Setup ---
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

app_logger = logging.getLogger("quart.app")
app_logger.setLevel(APP_CONFIG.LOG_LEVEL)
app_logger.addHandler(handler)
app_logger.propagate = False # Prevent duplicate messages in the root logger

logging.getLogger("hypercorn.access").propagate = False
logging.getLogger("hypercorn.error").propagate = False
# --- End Logging Setup ---


def create_app() -> Quart:
    """Build the Quart app exposing the protocol endpoints."""
    from uicp.api.uicp_routes import uicp_bp
    from uicp.components.registry import get_definition_registry
    from uicp.components.resolver import get_component_resolver

    app = Quart(__name__)
    app = cors(app, allow_origin="*")
    app.register_blueprint(uicp_bp)

    @app.before_serving
    async def load_protocol_state():
        registry = get_definition_registry()
        resolver = get_component_resolver()
        missing = [uid for uid in registry.uids() if not resolver.is_registered(uid)]
        app_logger.info(
            f"UICP ready: {len(registry)} component definition(s), "
            f"{len(resolver.registered_ids())} renderer(s)"
        )
        if missing:
            app_logger.warning(f"Components without a renderer (will show as unavailable): {', '.join(missing)}")

    return app


async def main(host: str, port: int):
    app = create_app()
    config = Config()
    config.bind = [f"{host}:{port}"]
    config.accesslog = None
    app_logger.info(f"Starting UICP server on http://{host}:{port}")
    await hypercorn.asyncio.serve(app, config)


def run():
    parser = argparse.ArgumentParser(description="Serve the UICP protocol endpoints.")
    parser.add_argument("--host", default=APP_CONFIG.API_HOST, help="Interface to bind.")
    parser.add_argument("--port", type=int, default=APP_CONFIG.API_PORT, help="Port to bind.")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.host, args.port))
    except KeyboardInterrupt:
        app_logger.info("Server shut down.")


if __name__ == "__main__":
    run()
