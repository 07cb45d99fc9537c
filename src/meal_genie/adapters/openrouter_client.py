"""OpenRouter chat completions client."""

from dataclasses import dataclass

import httpx

from meal_genie.domain.errors import AnalysisClientError
from meal_genie.services.analysis import AnalysisClient


@dataclass
class HttpxOpenRouterClient(AnalysisClient):
    """HTTPX-backed OpenRouter client."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    app_title: str = "MealGenie AI"

    @classmethod
    def create(cls, api_key: str, base_url: str) -> "HttpxOpenRouterClient":
        """Create an OpenRouter client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def analyze_image(
        self, *, model: str, image_data_url: str, prompt: str
    ) -> str:
        """Send a single user turn with text and image, returning the reply."""
        url = f"{self.base_url}/chat/completions"
        try:
            response = await self.http_client.post(
                url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "X-Title": self.app_title,
                },
                json={
                    "model": model,
                    "messages": [
                        {
                            "role": "user",
                            "content": [
                                {"type": "text", "text": prompt},
                                {
                                    "type": "image_url",
                                    "image_url": {"url": image_data_url},
                                },
                            ],
                        }
                    ],
                },
                timeout=60,
            )
        except httpx.HTTPError as exc:
            raise AnalysisClientError(f"OpenRouter request failed: {exc}") from exc
        if response.is_error:
            raise AnalysisClientError(_error_message(response))
        try:
            payload = response.json()
        except ValueError as exc:
            raise AnalysisClientError("OpenRouter returned invalid JSON") from exc
        content = _message_content(payload)
        if not content:
            raise AnalysisClientError("OpenRouter returned an empty response")
        return content

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _message_content(payload: object) -> str:
    """Return the first choice's message text, or an empty string."""
    if not isinstance(payload, dict):
        return ""
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return ""
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    return content if isinstance(content, str) else ""


def _error_message(response: httpx.Response) -> str:
    fallback = f"API error: {response.status_code}"
    try:
        payload = response.json()
    except ValueError:
        return fallback
    error = payload.get("error") if isinstance(payload, dict) else None
    message = error.get("message") if isinstance(error, dict) else None
    return message if isinstance(message, str) and message else fallback
