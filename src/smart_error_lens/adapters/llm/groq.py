"""Groq provider (OpenAI-compatible endpoint)."""

from .http import ChatCompletionsProvider


class GroqProvider(ChatCompletionsProvider):
    """Analyze prompts with a model hosted on Groq."""

    provider_name = "groq"
    default_model = "mixtral-8x7b-32768"
    endpoint = "https://api.groq.com/openai/v1/chat/completions"
    system_prompt = (
        "You are an expert software developer analyzing code errors. "
        "Provide detailed, actionable insights."
    )
    temperature = 0.3  # Keep responses focused
    max_tokens = 1024
