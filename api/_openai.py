import logging
import time

import requests

from api._config import Settings

logger = logging.getLogger("api")

CONFIG_ERROR = 'config'
UPSTREAM_ERROR = 'upstream'


class CompletionError(RuntimeError):
    """Chat completion failed; `kind` is 'config' or 'upstream'."""

    def __init__(self, kind: str, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


def _first_choice_text(data) -> str:
    try:
        content = data['choices'][0]['message']['content']
    except (KeyError, IndexError, TypeError):
        return ''
    return (content or '').strip() if isinstance(content, str) else ''


class CompletionClient:
    def __init__(self, settings: Settings, session=None):
        self.settings = settings
        self._http = session or requests

    def complete(self, system: str, user: str) -> str:
        """
        Send one system/user exchange and return the reply text, trimmed.

        Raises CompletionError when no API key is configured or when the
        upstream answers with a non-2xx status. A 2xx reply that does not
        carry the expected shape yields ''.
        """
        key = self.settings.openai_api_key
        if not key:
            raise CompletionError(CONFIG_ERROR, 'Missing OPENAI_API_KEY')

        payload = {
            'model': self.settings.openai_model,
            'temperature': self.settings.openai_temperature,
            'max_tokens': self.settings.openai_max_tokens,
            'messages': [
                {'role': 'system', 'content': system},
                {'role': 'user', 'content': user},
            ],
        }
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {key}',
        }
        started = time.monotonic()
        resp = self._http.post(
            self.settings.openai_url,
            json=payload,
            headers=headers,
            timeout=self.settings.openai_timeout,
        )
        logger.info("[OpenAI] status %s in %.0fms (prompt_chars=%d)",
                    resp.status_code, (time.monotonic() - started) * 1000, len(system) + len(user))
        if not resp.ok:
            raise CompletionError(UPSTREAM_ERROR, f'OpenAI error: {resp.text}')
        try:
            data = resp.json()
        except ValueError:
            return ''
        return _first_choice_text(data)
