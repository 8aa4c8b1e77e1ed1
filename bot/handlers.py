"""
Bot handlers for the Quick Reminder bot.
Collects reminder input, lists pending reminders and cancels them.

The ReminderService is injected through dispatcher workflow data
(dp["reminder_service"]).
"""

import logging
from typing import List, Optional, Tuple

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, StateFilter
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, InlineKeyboardMarkup, Message

from bot.keyboards import (
    get_back_to_menu_keyboard,
    get_main_menu_keyboard,
    get_reminders_keyboard,
    get_time_unit_keyboard,
)
from bot.states import ReminderStates
from config import settings
from models.reminder import Reminder, ReminderForm, ScheduleOutcome, TimeUnit
from scheduler.durations import format_time_left
from scheduler.reminders import ReminderService
from utils.constants import REMINDERS_DISPLAY_LIMIT

logger = logging.getLogger(__name__)

router = Router()

WELCOME_TEXT = "⏰ Quick Reminder\n\nChoose an option:"


def _default_unit() -> str:
    try:
        return TimeUnit(settings.default_time_unit).value
    except ValueError:
        return TimeUnit.MINUTES.value


def render_reminder_list(
    reminders: List[Reminder],
) -> Tuple[str, InlineKeyboardMarkup]:
    """Text and keyboard for the "Active Reminders" view."""
    if not reminders:
        return "📋 No active reminders.", get_back_to_menu_keyboard()

    lines = ["📋 Active Reminders:", ""]
    for reminder in reminders[:REMINDERS_DISPLAY_LIMIT]:
        lines.append(f"• {reminder.text}")
        lines.append(f"   {format_time_left(reminder)}")
    return "\n".join(lines), get_reminders_keyboard(reminders)


async def _edit_reminder_list(callback: CallbackQuery, reminder_service: ReminderService):
    text, keyboard = render_reminder_list(reminder_service.list_reminders())
    try:
        await callback.message.edit_text(text, reply_markup=keyboard)
    except TelegramBadRequest as e:
        # "message is not modified" on a refresh with nothing changed
        logger.debug(f"Reminder list not updated: {e}")


# ========== Start Command & Main Menu ==========


@router.message(Command("start"))
async def cmd_start(message: Message, state: FSMContext):
    """Handle /start command."""
    await state.clear()
    await message.answer(WELCOME_TEXT, reply_markup=get_main_menu_keyboard())


@router.message(Command("list"))
async def cmd_list(message: Message, state: FSMContext, reminder_service: ReminderService):
    """Handle /list command."""
    await state.clear()
    text, keyboard = render_reminder_list(reminder_service.list_reminders())
    await message.answer(text, reply_markup=keyboard)


@router.callback_query(F.data == "main_menu")
async def show_main_menu(callback: CallbackQuery, state: FSMContext):
    """Show main menu."""
    await state.clear()
    await callback.message.edit_text(WELCOME_TEXT, reply_markup=get_main_menu_keyboard())
    await callback.answer()


# ========== Set Reminder Flow ==========


@router.message(Command("remind"))
async def cmd_remind(message: Message, state: FSMContext):
    """Handle /remind command."""
    await state.set_state(ReminderStates.entering_text)
    await state.update_data(time_unit=_default_unit())
    await message.answer("✏️ Enter reminder text:")


@router.callback_query(F.data == "new_reminder")
async def start_reminder(callback: CallbackQuery, state: FSMContext):
    """Start the set-reminder flow from the menu."""
    await state.set_state(ReminderStates.entering_text)
    await state.update_data(time_unit=_default_unit())
    await callback.message.edit_text("✏️ Enter reminder text:")
    await callback.answer()


@router.message(StateFilter(ReminderStates.entering_text))
async def process_reminder_text(message: Message, state: FSMContext):
    """Store the label and ask for the unit."""
    await state.update_data(text=message.text or "")
    await state.set_state(ReminderStates.selecting_unit)

    data = await state.get_data()
    await message.answer(
        "⏱ Choose a time unit:",
        reply_markup=get_time_unit_keyboard(data.get("time_unit")),
    )


@router.callback_query(
    F.data.startswith("unit_"), StateFilter(ReminderStates.selecting_unit)
)
async def select_time_unit(callback: CallbackQuery, state: FSMContext):
    """Handle unit selection."""
    unit = callback.data.split("_", 1)[1]
    try:
        TimeUnit(unit)
    except ValueError:
        await callback.answer("Unknown time unit", show_alert=True)
        return

    await state.update_data(time_unit=unit)
    await state.set_state(ReminderStates.entering_time_value)
    await callback.message.edit_text(f"🔢 Enter number of {unit}:")
    await callback.answer()


@router.message(StateFilter(ReminderStates.entering_time_value))
async def process_time_value(
    message: Message, state: FSMContext, reminder_service: ReminderService
):
    """Schedule the reminder from the collected form."""
    data = await state.get_data()
    form = ReminderForm(
        text=data.get("text", ""),
        time_value=message.text or "",
        time_unit=data.get("time_unit", _default_unit()),
    )

    result = await reminder_service.schedule_reminder(form)

    if result.ok:
        await state.clear()
        await message.answer(
            f"✅ {result.reminder.text}\n{format_time_left(result.reminder)}",
            reply_markup=get_main_menu_keyboard(),
        )
        return

    if result.outcome == ScheduleOutcome.MISSING_INPUT and not form.text.strip():
        await state.set_state(ReminderStates.entering_text)
        await message.answer("✏️ Enter reminder text:")
    elif result.outcome in (ScheduleOutcome.MISSING_INPUT, ScheduleOutcome.INVALID_NUMBER):
        await message.answer(f"🔢 Enter number of {form.time_unit.value}:")
    else:
        await state.clear()
        await message.answer(WELCOME_TEXT, reply_markup=get_main_menu_keyboard())


# ========== Active Reminders ==========


@router.callback_query(F.data == "list_reminders")
async def show_reminders(callback: CallbackQuery, reminder_service: ReminderService):
    """Show pending reminders."""
    await _edit_reminder_list(callback, reminder_service)
    await callback.answer()


@router.callback_query(F.data.startswith("cancel_"))
async def cancel_reminder(callback: CallbackQuery, reminder_service: ReminderService):
    """Cancel a pending reminder and refresh the list."""
    reminder_id = callback.data.split("_", 1)[1]

    if reminder_id not in reminder_service.store:
        await callback.answer("This reminder is no longer pending")
    else:
        await reminder_service.cancel_reminder(reminder_id)
        await callback.answer()

    await _edit_reminder_list(callback, reminder_service)


def register_handlers(dp, chat_id: Optional[int] = None) -> None:
    """Register all handlers with dispatcher, restricted to one chat if given."""
    if chat_id is not None:
        router.message.filter(F.chat.id == chat_id)
        router.callback_query.filter(F.message.chat.id == chat_id)
    dp.include_router(router)
