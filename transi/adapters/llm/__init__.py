"""LLM adapters - Implementations of LLMGatewayPort.

Available implementations:
- OpenAIChatGateway: OpenAI-compatible chat completions
"""

from .openai_adapter import OpenAIChatGateway

__all__ = ["OpenAIChatGateway"]
