"""Telegram bot interface for the award search backend."""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Final

import aiohttp
from telegram import Update
from telegram.ext import ApplicationBuilder, CommandHandler, ContextTypes, MessageHandler, filters

from award_core import APOLOGY_MESSAGE, USAGE_MESSAGE

logging.basicConfig(level=logging.INFO)
LOGGER = logging.getLogger(__name__)

BACKEND_URL: Final[str] = os.getenv("AWARD_BACKEND_URL", "http://localhost:3000")
BOT_TOKEN: Final[str | None] = os.getenv("TELEGRAM_BOT_TOKEN")


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await update.message.reply_text(
        f"Send me a route and date to look up award space.\n{USAGE_MESSAGE}"
    )


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    if not update.message or not update.message.text:
        return
    data: dict[str, Any]
    try:
        timeout = aiohttp.ClientTimeout(total=60)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(
                f"{BACKEND_URL}/api/search",
                json={"message": update.message.text},
            ) as response:
                data = await response.json(content_type=None)
                if response.status == 400:
                    await update.message.reply_text(data.get("error") or USAGE_MESSAGE)
                    return
                if response.status != 200:
                    LOGGER.error("Backend error %s: %s", response.status, data)
                    await update.message.reply_text(APOLOGY_MESSAGE)
                    return
    except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:  # pragma: no cover - network failure handling
        LOGGER.error("Backend request failed: %s", exc)
        await update.message.reply_text("The search backend is unreachable right now. Please try later.")
        return

    await update.message.reply_text(data.get("report") or APOLOGY_MESSAGE)


def main() -> None:
    if not BOT_TOKEN:
        raise RuntimeError("TELEGRAM_BOT_TOKEN environment variable is required")
    application = ApplicationBuilder().token(BOT_TOKEN).build()
    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))
    application.run_polling()


if __name__ == "__main__":
    main()
