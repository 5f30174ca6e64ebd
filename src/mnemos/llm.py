"""LLM access for agents that generate responses."""

from typing import Any, Protocol

from groq import AsyncGroq

DEFAULT_MODEL = "llama-3.1-70b-versatile"


class LLMClient(Protocol):
    """Anything that can turn a prompt plus a system context into text."""

    async def complete(self, prompt: str, system: str | None = None) -> str:
        ...


class GroqLLMClient:
    """LLMClient backed by Groq chat completions.

    The fused memory context travels as the system message; the user's
    turn is the only user message.
    """

    def __init__(
        self,
        client: AsyncGroq,
        model: str = DEFAULT_MODEL,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls, model: str = DEFAULT_MODEL, api_key: str | None = None) -> "GroqLLMClient":
        """Build a client; AsyncGroq reads GROQ_API_KEY when ``api_key`` is None."""
        return cls(AsyncGroq(api_key=api_key), model=model)

    @property
    def model(self) -> str:
        return self._model

    def _request(self, prompt: str, system: str | None) -> dict[str, Any]:
        messages: list[dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        request: dict[str, Any] = {"model": self._model, "messages": messages}
        if self.temperature is not None:
            request["temperature"] = self.temperature
        if self.max_tokens is not None:
            request["max_tokens"] = self.max_tokens
        return request

    async def complete(self, prompt: str, system: str | None = None) -> str:
        """Complete a prompt and return the text response.

        Provider errors propagate; agents report them at their boundary.
        """
        response = await self._client.chat.completions.create(**self._request(prompt, system))
        if not response.choices:
            return ""
        return (response.choices[0].message.content or "").strip()
