"""
Inline keyboards for bot interactions.
"""

from typing import List, Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from models.reminder import Reminder, TimeUnit
from utils.constants import REMINDERS_DISPLAY_LIMIT


def get_main_menu_keyboard() -> InlineKeyboardMarkup:
    """Get main menu keyboard."""
    builder = InlineKeyboardBuilder()

    builder.row(
        InlineKeyboardButton(text="⏰ Set Reminder", callback_data="new_reminder")
    )
    builder.row(
        InlineKeyboardButton(text="📋 Active Reminders", callback_data="list_reminders")
    )

    return builder.as_markup()


def get_time_unit_keyboard(selected: Optional[str] = None) -> InlineKeyboardMarkup:
    """Unit selector: one button per unit on a single row, selected one marked."""
    builder = InlineKeyboardBuilder()

    buttons = []
    for unit in TimeUnit:
        label = unit.value.capitalize()
        if unit.value == selected:
            label = f"• {label} •"
        buttons.append(
            InlineKeyboardButton(text=label, callback_data=f"unit_{unit.value}")
        )
    builder.row(*buttons)
    builder.row(InlineKeyboardButton(text="🔙 Back", callback_data="main_menu"))

    return builder.as_markup()


def get_reminders_keyboard(reminders: List[Reminder]) -> InlineKeyboardMarkup:
    """One Cancel button per pending reminder."""
    builder = InlineKeyboardBuilder()

    for reminder in reminders[:REMINDERS_DISPLAY_LIMIT]:
        builder.row(
            InlineKeyboardButton(
                text=f"❌ Cancel: {reminder.text[:30]}",
                callback_data=f"cancel_{reminder.id}",
            )
        )

    builder.row(
        InlineKeyboardButton(text="🔄 Refresh", callback_data="list_reminders")
    )
    builder.row(InlineKeyboardButton(text="🔙 Main Menu", callback_data="main_menu"))

    return builder.as_markup()


def get_back_to_menu_keyboard() -> InlineKeyboardMarkup:
    """Get simple back to menu keyboard."""
    builder = InlineKeyboardBuilder()

    builder.row(InlineKeyboardButton(text="🔙 Main Menu", callback_data="main_menu"))

    return builder.as_markup()
