"""OpenRouter chat-completions provider implementation."""

import logging
import time

import requests

from core.config import APP_TITLE, AI_TIMEOUT_SECONDS, DEFAULT_BASE_URL, DEFAULT_MODEL, SYSTEM_INSTRUCTION
from core.errors import (
    ConfigurationError, EmptyResponseError, MalformedStructuredResponseError, TransportError
)
from core.interfaces import AIProvider
from core.utils import extract_json_object

logger = logging.getLogger(__name__)


def extract_content(data) -> str:
    """Pull the reply text out of a chat-completions response body.

    The first choice's message content may be a string or a list of parts
    (strings or {"text": ...} objects), which are concatenated.
    """
    try:
        message = data['choices'][0]['message']['content']
    except (KeyError, IndexError, TypeError):
        return ''
    if isinstance(message, list):
        parts = []
        for part in message:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict):
                parts.append(part.get('text') or '')
        return ''.join(parts)
    return message if isinstance(message, str) else ''


class OpenRouterProvider(AIProvider):
    """Sends single-turn prompts to an OpenAI-compatible chat endpoint."""

    def __init__(self, api_key: str | None, model_name: str = DEFAULT_MODEL,
                 base_url: str = DEFAULT_BASE_URL, timeout: float = AI_TIMEOUT_SECONDS,
                 referer: str = 'http://localhost'):
        self.api_key = api_key
        self.model_name = model_name
        self.base_url = base_url
        self.timeout = timeout
        self.referer = referer
        self.session = requests.Session()
        self.stats = {
            'calls': 0,
            'failures': 0,
            'prompt_tokens': 0,
            'completion_tokens': 0,
            'total_tokens': 0
        }

    def get_stats(self) -> dict:
        return dict(self.stats)

    def _record_usage(self, data: dict) -> None:
        usage = data.get('usage') if isinstance(data, dict) else None
        if not isinstance(usage, dict):
            return
        for key in ('prompt_tokens', 'completion_tokens', 'total_tokens'):
            value = usage.get(key)
            if isinstance(value, int):
                self.stats[key] += value

    def _build_request(self, prompt: str, structured: bool) -> dict:
        body = {
            'model': self.model_name,
            'messages': [
                {'role': 'system', 'content': SYSTEM_INSTRUCTION},
                {'role': 'user', 'content': prompt}
            ]
        }
        if structured:
            body['response_format'] = {'type': 'json_object'}
        return body

    def _post(self, body: dict) -> dict:
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {self.api_key}',
            'HTTP-Referer': self.referer,
            'X-Title': APP_TITLE
        }
        start_time = time.time()
        try:
            response = self.session.post(self.base_url, json=body, headers=headers,
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(None, str(e)) from e
        ms = int((time.time() - start_time) * 1000)

        if not response.ok:
            try:
                err_text = response.text
            except Exception:
                err_text = ''
            raise TransportError(response.status_code, err_text)

        try:
            data = response.json()
        except ValueError as e:
            raise EmptyResponseError(f"Response body is not JSON: {e}") from e
        self._record_usage(data)
        logger.info(f"{self.model_name} replied in {ms}ms (total tokens so far: {self.stats['total_tokens']})")
        return data

    def complete(self, prompt: str, structured: bool = False) -> str | dict:
        if not self.api_key:
            raise ConfigurationError(
                "OpenRouter API key not set. Set OPENROUTER_API_KEY or add "
                "'openrouter_api_key' to the config file."
            )

        self.stats['calls'] += 1
        try:
            data = self._post(self._build_request(prompt, structured))
            content = extract_content(data).strip()
            if not content:
                raise EmptyResponseError("AI service returned no content")
            if not structured:
                return content

            parsed = extract_json_object(content)
            if parsed is None:
                logger.warning(f"Failed to parse structured reply:\n{content}")
                raise MalformedStructuredResponseError("Reply is not a JSON object", raw=content)
            return parsed
        except (TransportError, EmptyResponseError, MalformedStructuredResponseError):
            self.stats['failures'] += 1
            raise
