"""
Main entry point for the Quick Reminder bot.
Wires the reminder core to Telegram and runs in polling mode.
"""

import asyncio
import sys

from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.memory import MemoryStorage

from bot import TelegramDeliveryChannel, TelegramStatusNotifier, register_handlers
from config import settings
from scheduler import (
    AppLifecycle,
    LifecycleReconciler,
    ReminderService,
    ReminderStore,
    SchedulerNotificationGateway,
    create_scheduler,
    install_signal_handlers,
)
from scheduler.lifecycle import remove_signal_handlers
from utils.logging_config import setup_logging

logger = setup_logging(
    name=__name__,
    log_level=settings.log_level,
    log_file="bot.log",
    log_dir=settings.log_dir,
)


async def main() -> None:
    """Build collaborators, start reconciliation and poll for updates."""
    bot = Bot(token=settings.bot_token)
    dp = Dispatcher(storage=MemoryStorage())

    scheduler = create_scheduler()
    channel = TelegramDeliveryChannel(bot, settings.telegram_chat_id)
    notifier = TelegramStatusNotifier(bot, settings.telegram_chat_id)
    gateway = SchedulerNotificationGateway(
        scheduler, channel, permission_check=channel.check_permission
    )
    store = ReminderStore(history_size=settings.reminder_history_size)
    lifecycle = AppLifecycle()

    reminder_service = ReminderService(
        store,
        gateway,
        notifier,
        notification_title=settings.notification_title,
        notification_sound=settings.notification_sound,
        max_text_length=settings.max_reminder_text_length,
    )
    reconciler = LifecycleReconciler(
        store,
        gateway,
        lifecycle,
        scheduler,
        sweep_interval_seconds=settings.sweep_interval_seconds,
    )

    loop = asyncio.get_running_loop()
    try:
        logger.info("Starting Quick Reminder bot...")

        dp["reminder_service"] = reminder_service
        register_handlers(dp, chat_id=settings.telegram_chat_id)
        logger.info("Handlers registered")

        reconciler.start()
        scheduler.start()
        install_signal_handlers(lifecycle, loop)
        logger.info("Scheduler started")

        await reminder_service.request_permission()

        logger.info("Bot is running in polling mode. Press Ctrl+C to stop.")
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())

    except asyncio.CancelledError:
        logger.info("Bot cancelled")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        raise
    finally:
        logger.info("Shutting down...")
        remove_signal_handlers(loop)
        reconciler.stop()
        if scheduler.running:
            scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")

        await notifier.drain()
        try:
            await bot.session.close()
            logger.info("Bot session closed")
        except Exception as e:
            logger.error(f"Error closing bot session: {e}", exc_info=True)

        logger.info("Bot shutdown complete")


def cli() -> None:
    """Console entry point."""
    try:
        settings.validate_all_required()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    cli()
