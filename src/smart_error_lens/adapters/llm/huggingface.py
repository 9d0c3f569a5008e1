"""HuggingFace Inference API provider."""

from __future__ import annotations

from typing import Any

import structlog

from ...utils.errors import AnalysisError
from .http import HTTPProvider

log = structlog.get_logger()

INFERENCE_URL = "https://api-inference.huggingface.co/models/{model}"

# Smaller model tried once when the configured one fails
SECONDARY_MODEL = "bigscience/bloom-560m"


class HuggingFaceProvider(HTTPProvider):
    """Analyze prompts with a text-generation model on the Inference API.

    If the configured model fails, the request is repeated once against
    ``SECONDARY_MODEL`` before giving up.
    """

    provider_name = "huggingface"
    default_model = "facebook/opt-1.3b"

    async def analyze(self, prompt: str) -> str:
        try:
            return await self._generate(self._model, prompt, top_p=0.95)
        except AnalysisError as e:
            if self._model == SECONDARY_MODEL:
                raise
            log.warning(
                "huggingface_secondary_model",
                model=self._model,
                secondary_model=SECONDARY_MODEL,
                error=str(e),
            )
            return await self._generate(SECONDARY_MODEL, prompt)

    async def _generate(self, model: str, prompt: str, top_p: float | None = None) -> str:
        parameters: dict[str, Any] = {
            "max_new_tokens": 250,
            "temperature": 0.7,
            "return_full_text": False,
        }
        if top_p is not None:
            parameters["top_p"] = top_p

        data = await self._post_json(
            INFERENCE_URL.format(model=model),
            {"inputs": prompt, "parameters": parameters},
            headers={"Authorization": f"Bearer {self._api_key}"},
        )

        # The API answers with a list for text generation, a dict for some models
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict):
            raise AnalysisError(self.name, f"Malformed {self.name} response")
        return self._require_text(data.get("generated_text"))
