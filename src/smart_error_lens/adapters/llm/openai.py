"""OpenAI chat completions provider."""

from .http import ChatCompletionsProvider


class OpenAIProvider(ChatCompletionsProvider):
    """Analyze prompts with an OpenAI chat model."""

    provider_name = "openai"
    default_model = "gpt-3.5-turbo"
    endpoint = "https://api.openai.com/v1/chat/completions"
