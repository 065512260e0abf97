"""HTTP helpers the chat widget uses to talk to the support chat API."""
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

import requests
from requests.exceptions import RequestException

CONNECTION_ERROR_REPLY = (
    "I'm having trouble connecting right now. Please check your internet connection "
    "and try again."
)
GENERIC_ERROR_REPLY = "Sorry, I encountered an error. Please try again."

SESSION_PARAM = "sessionId"
ROLE_BY_SENDER = {"user": "user", "ai": "assistant"}


def session_id_from_params(params: Mapping[str, Any]) -> Optional[str]:
    """Session id carried in the page URL, so it survives a browser reload."""
    value = params.get(SESSION_PARAM)
    if isinstance(value, list):
        value = value[0] if value else None
    return value or None


@dataclass
class WidgetReply:
    text: str
    session_id: Optional[str]
    is_error: bool = False
    error: Optional[str] = None


class ChatApiClient:
    def __init__(
        self,
        api_base_url: str,
        message_endpoint: str = "/api/chat/message",
        history_endpoint: str = "/api/chat/history",
        timeout: float = 60.0,
    ):
        self.api_base_url = api_base_url.rstrip("/")
        self.message_endpoint = message_endpoint
        self.history_endpoint = history_endpoint
        self.timeout = timeout

    def send_message(self, message: str, session_id: Optional[str]) -> WidgetReply:
        """Post one message; the returned session id replaces the stored one."""
        url = f"{self.api_base_url}{self.message_endpoint}"
        payload: Dict[str, Any] = {"message": message}
        if session_id:
            payload["sessionId"] = session_id
        try:
            resp = requests.post(url, json=payload, timeout=self.timeout)
        except RequestException:
            return WidgetReply(CONNECTION_ERROR_REPLY, session_id, is_error=True)

        try:
            data = resp.json() or {}
        except ValueError:
            data = {}

        if resp.status_code != 200:
            return WidgetReply(
                data.get("reply") or GENERIC_ERROR_REPLY,
                session_id,
                is_error=True,
                error=data.get("error"),
            )
        return WidgetReply(
            data.get("reply", ""),
            data.get("sessionId") or session_id,
            error=data.get("error"),
        )

    def fetch_history(self, session_id: str) -> List[Dict[str, Any]]:
        """Messages for a session, or an empty list when the API is unreachable."""
        url = f"{self.api_base_url}{self.history_endpoint}/{session_id}"
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except RequestException:
            return []
        data = resp.json() or {}
        return data.get("messages", [])

    def restore_messages(self, session_id: Optional[str]) -> List[Dict[str, str]]:
        """Chat bubbles for a stored session; nothing to restore without an id."""
        if not session_id:
            return []
        return [
            {"role": ROLE_BY_SENDER.get(m.get("sender"), "assistant"), "content": m.get("text", "")}
            for m in self.fetch_history(session_id)
        ]
