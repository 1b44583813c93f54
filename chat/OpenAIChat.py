# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-09-17
# Description: OpenAIChat
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Dict, Any, List, Optional

from openai import OpenAI

from utility.logging_utils import get_class_logger

Message = Dict[str, str]  # {"role": "system"|"user", "content": "..."}

JSON_OBJECT = {"type": "json_object"}


@dataclass
class OpenAIChat:
    """
    Chat-completions client for the translator (and the chat health probe).

    Reads cfg.openai_api_key / cfg.openai_base_url / cfg.openai_chat_model.
    Pass `client` to reuse an existing OpenAI client.
    """

    cfg: Any
    client: Any = None
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        self.model = getattr(self.cfg, "openai_chat_model", None)
        if not self.model:
            raise ValueError("Config missing openai_chat_model")

        if self.client is None:
            if not getattr(self.cfg, "openai_api_key", None):
                raise ValueError("Config missing openai_api_key")
            self.client = OpenAI(
                api_key=self.cfg.openai_api_key,
                base_url=getattr(self.cfg, "openai_base_url", None) or None,
            )

        self.logger.info("OpenAIChat ready (model=%s)", self.model)

    def complete(
            self,
            messages: List[Message],
            *,
            temperature: float = 0.0,
            max_tokens: int = 512,
            response_format: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """One chat-completions call; returns the SDK response object."""
        if not messages:
            raise ValueError("messages must be non-empty.")

        params: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if response_format is not None:
            params["response_format"] = response_format

        self.logger.debug(
            "Chat request: model=%s messages=%d max_tokens=%s json=%s",
            self.model,
            len(messages),
            max_tokens,
            response_format is not None,
        )
        resp = self.client.chat.completions.create(**params)
        self.logger.debug("Token usage: %r", getattr(resp, "usage", None))
        return resp

    def simple_chat(
            self,
            user_text: str,
            system_text: Optional[str] = None,
            **kwargs: Any,
    ) -> dict:
        messages: List[Message] = []
        if system_text:
            messages.append({"role": "system", "content": system_text})
        messages.append({"role": "user", "content": user_text})

        resp = self.complete(messages, **kwargs)

        try:
            answer = resp.choices[0].message.content or ""
            finish_reason = resp.choices[0].finish_reason
        except (AttributeError, IndexError, TypeError) as e:
            self.logger.error("Unexpected chat response format: %s", e, exc_info=True)
            raise RuntimeError(f"Unexpected chat response format: {e}") from e

        return {
            "answer": answer,
            "finish_reason": finish_reason,
            "usage": getattr(resp, "usage", None),
            "model": getattr(resp, "model", None),
        }

    def json_chat(self, user_text: str, system_text: str, **kwargs: Any) -> str:
        """
        Ask for a JSON object reply and return the raw JSON text.
        A reply cut off by max_tokens is rejected rather than parsed.
        """
        result = self.simple_chat(user_text, system_text=system_text, response_format=JSON_OBJECT, **kwargs)
        if result["finish_reason"] == "length":
            raise RuntimeError("JSON reply truncated at max_tokens")
        return result["answer"]

    def healthcheck(self) -> bool:
        try:
            reply = self.simple_chat("Reply with OK.", max_tokens=5)
        except Exception as e:
            self.logger.warning("Chat healthcheck failed: %s", e)
            return False
        return bool(reply["answer"].strip())
