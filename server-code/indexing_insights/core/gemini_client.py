# indexing_insights/core/gemini_client.py
from __future__ import annotations
from dataclasses import dataclass

import google.generativeai as genai
from google.api_core.exceptions import ResourceExhausted


class CompletionServiceError(Exception):
    """The text-completion service could not be reached or failed the request."""


@dataclass
class GeminiClient:
    api_key: str
    model: str = "gemini-1.5-pro"
    # Fallback model used when rate limited or quota-exhausted.
    fallback_model: str = "gemini-1.5-flash"
    temperature: float = 0.0
    timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        genai.configure(api_key=self.api_key)
        self._primary = genai.GenerativeModel(self.model)
        self._fallback = (
            genai.GenerativeModel(self.fallback_model)
            if self.fallback_model and self.fallback_model != self.model
            else self._primary
        )

    def _generate(self, model, prompt: str):
        return model.generate_content(
            prompt,
            generation_config={"temperature": self.temperature},
            request_options={"timeout": self.timeout_seconds},
        )

    def _try_generate(self, prompt: str):
        """Try primary model; on quota (429) fall back once to fallback model."""
        try:
            return self._generate(self._primary, prompt)
        except ResourceExhausted:
            if self._fallback is self._primary:
                raise
            return self._generate(self._fallback, prompt)
        except Exception as e:
            # Heuristic: if looks like quota/rate limit, fall back once
            msg = str(e).lower()
            if ("429" in msg or "quota" in msg or "rate" in msg) and (self._fallback is not self._primary):
                return self._generate(self._fallback, prompt)
            raise

    def complete(self, prompt: str) -> str:
        """
        Single, non-streaming completion returning plain text.
        Any transport failure is raised as CompletionServiceError.
        """
        try:
            resp = self._try_generate(prompt)
        except Exception as e:
            raise CompletionServiceError(str(e)) from e
        # .text raises when the candidate was blocked; fall back to first part
        try:
            if resp.text:
                return resp.text
        except ValueError:
            pass
        try:
            return resp.candidates[0].content.parts[0].text  # type: ignore[attr-defined]
        except (AttributeError, IndexError):
            return ""
