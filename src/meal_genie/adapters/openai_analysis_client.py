"""OpenAI Responses API client for meal photo analysis."""

from dataclasses import dataclass

from openai import AsyncOpenAI, OpenAIError

from meal_genie.domain.errors import AnalysisClientError
from meal_genie.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(cls, api_key: str, store: bool = False) -> "OpenAIAnalysisClient":
        """Create an OpenAI analysis client."""
        return cls(client=AsyncOpenAI(api_key=api_key), store=store)

    async def analyze_image(
        self, *, model: str, image_data_url: str, prompt: str
    ) -> str:
        """Send the prompt and image, returning the free-form reply text."""
        try:
            response = await self.client.responses.create(
                model=model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "input_text", "text": prompt},
                            {"type": "input_image", "image_url": image_data_url},
                        ],
                    }
                ],
                store=self.store,
            )
        except OpenAIError as exc:
            raise AnalysisClientError(f"OpenAI request failed: {exc}") from exc
        output_text = response.output_text
        if not output_text:
            raise AnalysisClientError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
