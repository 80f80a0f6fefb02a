"""
Application entrypoint and route definitions.

Registers the chat pages and starts the NiceGUI app.
"""

from dotenv import load_dotenv

# Before the imports below: loggers read their level at import time
load_dotenv()

from nicegui import ui  # noqa: E402

from app.chat_service.services.mode_registry import DEFAULT_MODE_KEY  # noqa: E402
from frontend.config import settings  # noqa: E402
from frontend.pages.chat_page import show_chat_page  # noqa: E402
from frontend.utils.logger import get_logger  # noqa: E402

logger = get_logger(__name__)


@ui.page("/")
def root() -> None:
    """Root route – redirects to the default mode."""
    logger.debug("Root route accessed; redirecting to default mode")
    ui.navigate.to(f"/chat/{DEFAULT_MODE_KEY}")


@ui.page("/chat")
async def chat_default() -> None:
    """Chat page without a mode."""
    await show_chat_page(None)


@ui.page("/chat/{mode}")
async def chat(mode: str) -> None:
    """Chat page for a mode key; unknown keys fall back to the default."""
    logger.debug("Chat page accessed", extra={"mode": mode})
    await show_chat_page(mode)


def start_app() -> None:
    """
    Start the NiceGUI application.
    """
    logger.info("Starting Sahayak frontend application")

    ui.run(
        title=settings.TITLE,
        host=settings.HOST,
        port=settings.PORT,
        reload=False,
        storage_secret=settings.STORAGE_SECRET,
    )


if __name__ in {"__main__", "__mp_main__"}:
    start_app()
