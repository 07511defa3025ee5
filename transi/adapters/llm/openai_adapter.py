"""OpenAI-compatible chat completion gateway.

The universal fallback: any question can be answered here when no
structured gateway produced something usable. Output length is bounded by
`max_tokens`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...config import LLMConfig, get_config
from ...domain.errors import ConfigMissing, UpstreamMalformed
from ...domain.models import Completion, Empty, GatewayResult, Success
from ..http import HttpClient


class _Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    content: Optional[str] = None


class _Choice(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: _Message


class ChatCompletionResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    model: str = ""
    choices: List[_Choice] = Field(default_factory=list)


@dataclass
class OpenAIChatGateway:
    """Chat completions over plain HTTP.

    This adapter implements LLMGatewayPort.
    """

    config: LLMConfig = field(default_factory=lambda: get_config().llm)
    http: HttpClient = field(default_factory=HttpClient)
    name: str = "openai"
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def fetch(
        self,
        system_prompt: Optional[str],
        user_text: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> GatewayResult:
        """Complete a conversation of one optional system and one user message."""
        if not self.config.enabled:
            raise ConfigMissing(
                "LLM disabled: no API key configured",
                gateway=self.name,
                setting_name="OPENAI_API_KEY",
            )

        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_text})

        body: Dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "max_tokens": max_tokens or self.config.max_tokens,
            "temperature": (
                self.config.temperature if temperature is None else temperature
            ),
        }
        payload = self.http.post_json(
            self.config.base_url,
            body,
            gateway=self.name,
            headers={"Authorization": f"Bearer {self.config.api_key}"},
        )
        try:
            response = ChatCompletionResponse.model_validate(payload)
        except ValidationError as e:
            raise UpstreamMalformed(
                "chat completion payload malformed", gateway=self.name, cause=e
            )

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            return Empty(source=self.name, reason="empty completion")

        self._logger.info(
            "Completion received",
            extra={"model": response.model or self.config.model, "chars": len(content)},
        )
        return Success(
            Completion(text=content.strip(), model=response.model or self.config.model),
            source=self.name,
        )
