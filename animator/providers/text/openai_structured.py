"""
OpenAI structured-output text provider.
"""
import json
import logging
from typing import Optional, Type, TypeVar

from openai import OpenAI, OpenAIError
from pydantic import BaseModel, ValidationError

from ..exceptions import MalformedResponse, ProviderError, ProviderUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class OpenAIStructuredText:
    """
    Generates JSON objects validated against a pydantic schema.

    The schema's JSON Schema is appended to the system prompt and the model
    is asked for a json_object response, which is then validated.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gpt-4o-2024-08-06",
        client: Optional[OpenAI] = None,
        temperature: float = 0.7,
    ):
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        if client is not None:
            self.client = client
        else:
            self.client = OpenAI(api_key=api_key) if api_key else None

    @property
    def name(self) -> str:
        return "openai"

    @property
    def is_available(self) -> bool:
        return self.client is not None

    def generate(self, system_prompt: str, user_prompt: str, schema: Type[T]) -> T:
        if not self.is_available:
            raise ProviderUnavailable(self.name, "Missing OPENAI_API_KEY")

        schema_json = json.dumps(schema.model_json_schema(by_alias=True))
        system = f"{system_prompt}\n\nRespond with a single JSON object matching this JSON Schema:\n{schema_json}"

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise ProviderError(self.name, f"Completion failed: {e}") from e

        content = response.choices[0].message.content or ""
        try:
            return schema.model_validate_json(content)
        except ValidationError as e:
            logger.error(f"[STORY] {schema.__name__} did not validate: {content[:300]}")
            raise MalformedResponse(self.name, f"{schema.__name__} validation failed: {e}") from e
