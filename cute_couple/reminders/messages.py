"""
sweetReminder の既定メッセージプール。

setting.toml の sweet_reminder_messages が未指定のときに使う。
"""

from __future__ import annotations

DEFAULT_SWEET_REMINDERS: tuple[str, ...] = (
    "💧 Time to drink some water, beautiful! Stay hydrated! 💕",
    "🌸 Take a deep breath and smile - you're amazing! ✨",
    "📚 How's your study session going? You're doing great! 💪",
    "☀️ Don't forget to take a little break and stretch! 🤗",
    "💖 You're absolutely wonderful - just a reminder! 🥰",
    "🍎 Have you eaten something healthy today? Take care of yourself! 💝",
    "🌙 Remember to get enough sleep tonight - sweet dreams! 😴",
    "📝 Check your to-do list - you've got this! 🎯",
    "🎵 Play your favorite song and dance a little! 💃",
    "🌺 You're loved and appreciated more than you know! 💕",
)


def describe_lookahead(seconds: int) -> str:
    """先読み幅を eventReminder の文面用に整形する（例: 3600 -> "1 hour"）。"""

    s = int(seconds)
    if s % 3600 == 0:
        hours = s // 3600
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    if s % 60 == 0:
        minutes = s // 60
        return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"
    return f"{s} seconds"


def format_event_reminder_message(title: str, *, lookahead_seconds: int) -> str:
    """eventReminder のメッセージ本文を組み立てる。"""

    return f"🎉 Upcoming event: {title} in {describe_lookahead(lookahead_seconds)}! 💕"
