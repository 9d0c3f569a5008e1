"""Google PaLM (Generative Language API) provider."""

from ...utils.errors import AnalysisError
from .http import HTTPProvider

GENERATE_TEXT_URL = "https://generativelanguage.googleapis.com/v1beta2/{model}:generateText"


class PaLMProvider(HTTPProvider):
    """Analyze prompts with a PaLM text model."""

    provider_name = "palm"
    default_model = "models/text-bison-001"

    async def analyze(self, prompt: str) -> str:
        data = await self._post_json(
            GENERATE_TEXT_URL.format(model=self._model),
            {"prompt": {"text": prompt}},
            params={"key": self._api_key},
        )

        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not candidates:
            raise AnalysisError(self.name, "No response from PaLM")
        if not isinstance(candidates[0], dict):
            raise AnalysisError(self.name, f"Malformed {self.name} response")
        return self._require_text(candidates[0].get("output"))
