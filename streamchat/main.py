"""Application entry point.

Integrated mode serves the API and the NiceGUI page from one uvicorn
server. Separate mode starts them as two processes. In both modes the UI
sends chat requests to the API these settings start, unless API_BASE_URL
names another server.
"""

import logging
import os
import subprocess
import sys
import time

from streamchat.settings import ServerSettings, get_server_settings

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def client_environment(settings: ServerSettings) -> dict[str, str]:
    """Environment for the UI, with the chat client aimed at our API."""
    env = dict(os.environ)
    env.setdefault("API_BASE_URL", settings.api_base_url)
    return env


def api_command(settings: ServerSettings) -> list[str]:
    command = [
        sys.executable,
        "-m",
        "uvicorn",
        "streamchat.api.app:app",
        "--host",
        settings.host,
        "--port",
        str(settings.port),
        "--log-level",
        settings.log_level.lower(),
    ]
    if settings.reload:
        command.append("--reload")
    return command


def ui_command() -> list[str]:
    return [sys.executable, "-m", "streamchat.ui.chat_page"]


def run_integrated(settings: ServerSettings) -> None:
    """Serve the API and the chat page from one server on settings.port."""
    import uvicorn
    from nicegui import ui

    os.environ.setdefault("API_BASE_URL", settings.api_base_url)

    from streamchat.api.app import create_app
    from streamchat.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app(settings)
    ui.run_with(app, title="streamchat", favicon="💬")

    logger.info(f"Chat UI and API on {settings.api_base_url}/")
    logger.info(f"Chat requests go to {os.environ['API_BASE_URL']}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def run_separate(settings: ServerSettings) -> None:
    """Start the API and the UI as child processes and stop both when one exits."""
    env = client_environment(settings)
    logger.info(f"Starting API on port {settings.port}, UI on port {settings.ui_port}")
    logger.info(f"Chat requests go to {env['API_BASE_URL']}")

    processes = {
        "API": subprocess.Popen(api_command(settings)),
        "UI": subprocess.Popen(ui_command(), env=env),
    }
    try:
        while all(proc.poll() is None for proc in processes.values()):
            time.sleep(1)
        for name, proc in processes.items():
            if proc.poll() is not None:
                logger.warning(f"{name} server exited with code {proc.returncode}")
    except KeyboardInterrupt:
        logger.info("Shutting down servers...")
    finally:
        for proc in processes.values():
            proc.terminate()
        for proc in processes.values():
            proc.wait()


def main() -> None:
    """Start streamchat in the mode named by RUN_MODE (default integrated)."""
    settings = get_server_settings()
    configure_logging(settings.log_level)

    logger.info(f"Starting streamchat in {settings.run_mode} mode")

    if settings.run_mode == "separate":
        run_separate(settings)
    else:
        run_integrated(settings)


if __name__ == "__main__":
    main()
