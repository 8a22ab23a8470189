"""Telegram bot interface for the accountant.

Every text message (commands included) goes to the dispatcher, keyed by
chat id. Replies use Telegram's Markdown; if Telegram rejects the markup the
reply is resent as plain text. A persistence failure is reported to the chat
and then stops the bot.
"""

import re

from telegram import Update
from telegram.constants import ParseMode
from telegram.error import BadRequest
from telegram.ext import ApplicationBuilder, MessageHandler, filters, ContextTypes

_MENTION = re.compile(r"^(/[a-zA-Z_0-9]+)@([a-zA-Z_0-9]+)")


def _log(msg):
    print(msg, flush=True)


def strip_mention(text, bot_username):
    """Turn "/add@AccountantBot @a 10" into "/add @a 10".

    Only a mention of this bot is stripped; other text is returned as is.
    """
    m = _MENTION.match(text)
    if m and bot_username and m.group(2).lower() == bot_username.lower():
        return m.group(1) + text[m.end():]
    return text


async def _reply(message, text):
    try:
        await message.reply_text(text, parse_mode=ParseMode.MARKDOWN)
    except BadRequest as e:
        _log(f"[INFO] Markdown rejected ({e}), resending as plain text")
        await message.reply_text(text)


def make_handler(dispatcher, state=None):
    """Build the message callback bound to a dispatcher.

    state, if given, is a dict whose "failed" key is set to True when a
    storage failure stops the bot.
    """

    async def _handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
        message = update.message
        if message is None or not message.text:
            return

        user = message.from_user
        username = f"@{user.username}" if user and user.username else "unknown"
        chat_id = message.chat_id
        _log(f"[INFO] Received message from user {username} in chat {chat_id}: '{message.text}'")

        text = strip_mention(message.text, context.bot.username)
        response = dispatcher.dispatch(chat_id, text, source=f"[Telegram:{username}]")

        await _reply(message, response.text)
        _log(f"[INFO] Response has been sent: {response.text}")

        if not response.ok:
            _log("[ERROR] Ledger storage failed, stopping the bot")
            if state is not None:
                state["failed"] = True
            context.application.stop_running()

    return _handle_message


def run_telegram(token, dispatcher):
    """Run the bot until it is stopped (blocking).

    Returns True if it stopped because the ledger store failed.
    """
    state = {"failed": False}
    app = ApplicationBuilder().token(token).build()
    app.add_handler(MessageHandler(filters.TEXT, make_handler(dispatcher, state)))
    _log("Telegram bot started.")
    app.run_polling(drop_pending_updates=False)
    return state["failed"]
