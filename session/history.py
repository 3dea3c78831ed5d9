from markupsafe import Markup

USER_PREVIEW_CHARS = 50
BOT_PREVIEW_CHARS = 80
NO_RESPONSE = "No response"


def _truncate(text, limit):
    return text[:limit] + "..." if len(text) > limit else text


def _plain(message):
    if message.is_markup:
        return " ".join(Markup(message.content).striptags().split())
    return message.content


def conversation_summaries(messages):
    """
    Pair each user message with the bot message that follows it.
    Most recent conversation first.
    """
    summaries = []
    for index, message in enumerate(messages):
        if message.role != "user":
            continue

        following = messages[index + 1] if index + 1 < len(messages) else None
        bot_text = _plain(following) if following is not None and following.role == "bot" else NO_RESPONSE

        summaries.append({
            "user_message": _truncate(message.content, USER_PREVIEW_CHARS),
            "bot_message": _truncate(bot_text, BOT_PREVIEW_CHARS),
            "timestamp": message.timestamp.isoformat(),
        })

    summaries.reverse()
    return summaries
