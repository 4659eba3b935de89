from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Mapping, Optional

import urllib.error
import urllib.parse
import urllib.request

DEFAULT_MODEL = "gpt-4o"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_AZURE_API_VERSION = "2024-10-21"


@dataclass
class ChatClient:
    def complete(self, system: str, user: str, temperature: float = 0.3) -> str:
        raise NotImplementedError


@dataclass
class OpenAIChatClient(ChatClient):
    api_key: str
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float | None = None

    def complete(self, system: str, user: str, temperature: float = 0.3) -> str:
        payload = build_chat_payload(system, user, temperature=temperature, model=self.model)
        response_payload = post_json(
            f"{self.base_url.rstrip('/')}/chat/completions",
            payload,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
        )
        return extract_openai_content(response_payload).strip()


@dataclass
class AzureOpenAIChatClient(ChatClient):
    endpoint: str
    api_key: str
    deployment: str = DEFAULT_MODEL
    api_version: str = DEFAULT_AZURE_API_VERSION
    timeout: float | None = None

    def complete(self, system: str, user: str, temperature: float = 0.3) -> str:
        payload = build_chat_payload(system, user, temperature=temperature)
        response_payload = post_json(
            self.completions_url(),
            payload,
            headers={"api-key": self.api_key},
            timeout=self.timeout,
        )
        return extract_openai_content(response_payload).strip()

    def completions_url(self) -> str:
        deployment = urllib.parse.quote(self.deployment, safe="")
        query = urllib.parse.urlencode({"api-version": self.api_version})
        return (
            f"{self.endpoint.rstrip('/')}/openai/deployments/{deployment}"
            f"/chat/completions?{query}"
        )


def chat_client_from_env(environ: Mapping[str, str] | None = None) -> Optional[ChatClient]:
    env = os.environ if environ is None else environ
    timeout = parse_timeout(env.get("HANZI_READER_TIMEOUT"))
    azure_endpoint = env.get("AZURE_OPENAI_ENDPOINT")
    azure_key = env.get("AZURE_OPENAI_KEY")
    if azure_endpoint and azure_key:
        return AzureOpenAIChatClient(
            endpoint=azure_endpoint,
            api_key=azure_key,
            deployment=env.get("AZURE_OPENAI_DEPLOYMENT", DEFAULT_MODEL),
            api_version=env.get("AZURE_OPENAI_API_VERSION", DEFAULT_AZURE_API_VERSION),
            timeout=timeout,
        )
    api_key = env.get("OPENAI_API_KEY")
    if api_key:
        return OpenAIChatClient(
            api_key=api_key,
            model=env.get("OPENAI_MODEL", DEFAULT_MODEL),
            base_url=env.get("OPENAI_BASE_URL", DEFAULT_BASE_URL),
            timeout=timeout,
        )
    return None


def parse_timeout(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"HANZI_READER_TIMEOUT must be a number, got {raw!r}") from exc
    if value <= 0:
        raise RuntimeError("HANZI_READER_TIMEOUT must be positive")
    return value


def build_chat_payload(
    system: str,
    user: str,
    temperature: float,
    model: str | None = None,
) -> dict:
    payload: dict = {
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "temperature": temperature,
    }
    if model is not None:
        payload["model"] = model
    return payload


def extract_openai_content(payload: dict) -> str:
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ValueError("Unexpected chat completion response format") from exc
    if not isinstance(content, str):
        raise ValueError("Chat completion content must be a string")
    return content


def post_json(
    url: str,
    payload: dict,
    headers: Mapping[str, str],
    timeout: float | None = None,
) -> dict:
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    request = urllib.request.Request(
        url,
        data=body,
        headers={**headers, "Content-Type": "application/json"},
        method="POST",
    )
    # Without an explicit timeout urllib falls back to the socket default.
    open_kwargs = {} if timeout is None else {"timeout": timeout}
    try:
        with urllib.request.urlopen(request, **open_kwargs) as response:
            if response.status >= 400:
                raise RuntimeError(f"Chat request failed with status {response.status}")
            raw = response.read().decode("utf-8")
    except urllib.error.HTTPError as exc:
        body_text = ""
        if exc.fp is not None:
            body_text = exc.fp.read().decode("utf-8", errors="ignore")
        detail = summarize_error_body(body_text)
        if detail:
            raise RuntimeError(f"Chat request failed: {exc.code} {detail}") from exc
        raise RuntimeError(f"Chat request failed: {exc.code}") from exc
    except urllib.error.URLError as exc:
        raise RuntimeError(f"Chat request failed: {exc.reason}") from exc
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError("Chat response is not valid JSON") from exc


def summarize_error_body(body_text: str) -> str:
    cleaned = body_text.strip()
    if not cleaned:
        return ""
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError:
        return cleaned[:200]
    if not isinstance(payload, dict):
        return cleaned[:200]
    error = payload.get("error")
    if not isinstance(error, dict):
        return cleaned[:200]
    parts: list[str] = []
    err_type = error.get("type")
    if isinstance(err_type, str) and err_type.strip():
        parts.append(err_type.strip())
    err_code = error.get("code")
    if isinstance(err_code, str) and err_code.strip() and err_code.strip() not in parts:
        parts.append(err_code.strip())
    message = error.get("message")
    if isinstance(message, str) and message.strip():
        parts.append(message.strip())
    if not parts:
        return cleaned[:200]
    return " | ".join(parts)[:200]
