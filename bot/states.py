"""
FSM (Finite State Machine) states for the reminder conversation flow.
"""

from aiogram.fsm.state import State, StatesGroup


class ReminderStates(StatesGroup):
    """States for the "set reminder" flow."""

    entering_text = State()
    selecting_unit = State()
    entering_time_value = State()
