"""GitHub -> Telegram webhook relay.

Point a GitHub webhook at::

    /webhook?from=github&to=telegram&tg_chat_id=<chat>&tg_token=<bot token>

Opened issues, opened pull requests and created discussions are posted
to the chat as a MarkdownV2 link. Other actions of those events are
acknowledged without sending anything.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from edgebin.app import App
from edgebin.config import AppConfig
from edgebin.errors import CustomError
from edgebin.fetch import Fetcher
from edgebin.http.request import Request
from edgebin.http.response import Response

logger = logging.getLogger("edgebin.routes")

_MARKDOWN_V2_SPECIAL = re.compile(r"([-_*\[\]()~`>#+=|{}.!])")


def escape_markdown_v2(text: str) -> str:
    """Backslash-escape the characters Telegram MarkdownV2 reserves."""
    return _MARKDOWN_V2_SPECIAL.sub(r"\\\1", text)


@dataclass(frozen=True, slots=True)
class Notification:
    """A message ready for Telegram plus the link to preview."""

    text: str
    url: str


def _issue(payload: dict[str, Any]) -> Notification:
    issue = payload["issue"]
    url = issue["html_url"]
    return Notification(f"[{escape_markdown_v2(issue['title'])}]({url})", url)


def _discussion(payload: dict[str, Any]) -> Notification:
    discussion = payload["discussion"]
    url = discussion["html_url"]
    category = discussion["category"]["name"]
    title = escape_markdown_v2(discussion["title"])
    return Notification(f"[{title}]({url}) in {escape_markdown_v2(category)}", url)


def _pull_request(payload: dict[str, Any]) -> Notification:
    pull = payload["pull_request"]
    url = pull.get("html_url") or pull["url"]
    return Notification(f"[{escape_markdown_v2(pull['title'])}]({url})", url)


# event -> (action worth relaying, message builder)
EVENTS: dict[str, tuple[str, Callable[[dict[str, Any]], Notification]]] = {
    "issues": ("opened", _issue),
    "discussion": ("created", _discussion),
    "pull_request": ("opened", _pull_request),
}


def _require_params(request: Request) -> tuple[str, str]:
    query = request.query
    source, target = query.get("from"), query.get("to")
    if not source or not target:
        raise CustomError("Missing 'from' or 'to' parameter", 400)
    if source != "github" or target != "telegram":
        raise CustomError(
            f"Unsupported relay {source!r} -> {target!r}, only github -> telegram", 400
        )

    user_agent = request.headers.get("user-agent") or ""
    if "GitHub-Hookshot" not in user_agent:
        raise CustomError("Not a GitHub webhook", 400)

    chat_id, token = query.get("tg_chat_id"), query.get("tg_token")
    if not chat_id or not token:
        raise CustomError("Missing 'tg_chat_id' or 'tg_token' parameter", 400)
    return chat_id, token


async def send_telegram(
    fetcher: Fetcher, api: str, token: str, chat_id: str, notification: Notification
) -> Response:
    """POST a MarkdownV2 message and hand Telegram's answer back unchanged."""
    logger.info("Relaying to Telegram chat %s: %s", chat_id, notification.text)
    upstream = await fetcher.post_json(
        f"{api.rstrip('/')}/bot{token}/sendMessage",
        {
            "text": notification.text,
            "chat_id": chat_id,
            "parse_mode": "MarkdownV2",
            "link_preview_options": {"url": notification.url},
        },
    )
    return Response(
        body=upstream.content,
        status=upstream.status_code,
        content_type=upstream.headers.get("content-type", "application/json"),
    )


async def webhook(request: Request, fetcher: Fetcher, config: AppConfig) -> Response | dict:
    chat_id, token = _require_params(request)

    event = request.headers.get("x-github-event") or ""
    if event == "ping":
        return {"message": "pong"}
    if event not in EVENTS:
        raise CustomError(f"Unsupported GitHub event: {event or 'none'}", 400)

    try:
        payload = await request.json()
    except ValueError as exc:
        raise CustomError(f"Invalid JSON payload: {exc}", 400) from None
    if not isinstance(payload, dict):
        raise CustomError("Webhook payload must be a JSON object", 400)

    wanted, build = EVENTS[event]
    action = payload.get("action")
    if action != wanted:
        return {"message": f"Skipped {event} event: only '{wanted}' is relayed, got {action!r}"}

    try:
        notification = build(payload)
    except (KeyError, TypeError) as exc:
        raise CustomError(f"Malformed {event} payload, missing {exc}", 400) from None
    return await send_telegram(fetcher, config.telegram_api, token, chat_id, notification)


def register(app: App) -> None:
    app.route("/webhook", name="webhook")(webhook)
