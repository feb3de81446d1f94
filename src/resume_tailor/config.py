# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Runtime configuration, read from the environment.

Also owns CA bundle resolution for outbound HTTPS in proxy environments.
Checks (in priority order):
  1. Explicit override via --ca-bundle CLI arg
  2. REQUESTS_CA_BUNDLE environment variable
  3. CURL_CA_BUNDLE environment variable
  4. SSL_CERT_FILE environment variable
  5. System defaults (True, i.e. certifi / OS trust store)
"""

import os
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_NER_MODEL = "dslim/bert-base-NER"
HF_INFERENCE_URL = "https://api-inference.huggingface.co/models/{model}"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024

# Set by the CLI --ca-bundle flag
_ca_bundle_override: str | None = None


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric {name}={raw!r}, using {default}")
        return default


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {name}={raw!r}, using {default}")
        return default


@dataclass(frozen=True)
class Settings:
    huggingface_api_key: str | None = None
    ner_model: str = DEFAULT_NER_MODEL
    ner_api_url: str | None = None
    enhancement_timeout: float = 5.0
    ner_min_score: float = 0.5
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    llm_provider: str = "openai"
    openai_api_key: str | None = None
    gemini_api_key: str | None = None
    log_level: str = "INFO"

    @property
    def ner_endpoint(self) -> str:
        return self.ner_api_url or HF_INFERENCE_URL.format(model=self.ner_model)


def load_settings() -> Settings:
    """Builds Settings from the current process environment."""
    return Settings(
        huggingface_api_key=_get_env("HUGGINGFACE_API_KEY") or _get_env("HF_API_KEY"),
        ner_model=_get_env("NER_MODEL", DEFAULT_NER_MODEL),
        ner_api_url=_get_env("NER_API_URL"),
        enhancement_timeout=_get_env_float("ENHANCEMENT_TIMEOUT", 5.0),
        ner_min_score=_get_env_float("NER_MIN_SCORE", 0.5),
        max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        llm_provider=_get_env("LLM_PROVIDER", "openai").lower(),
        openai_api_key=_get_env("OPENAI_API_KEY"),
        gemini_api_key=_get_env("GEMINI_API_KEY"),
        log_level=_get_env("LOG_LEVEL", "INFO").upper(),
    )


def set_ca_bundle_override(path: str | None) -> None:
    """Pins the CA bundle from a CLI argument. Passing None clears the override."""
    global _ca_bundle_override
    _ca_bundle_override = path
    if path:
        logger.info(f"CA bundle override set to: {path}")


def get_ca_bundle() -> str | bool:
    """
    Resolve the CA bundle to use for outbound HTTPS requests.

    Returns:
        str: Path to a CA bundle file, or
        bool: True to use the default system/certifi trust store.
    """
    if _ca_bundle_override:
        return _ca_bundle_override

    for var in ("REQUESTS_CA_BUNDLE", "CURL_CA_BUNDLE", "SSL_CERT_FILE"):
        value = os.environ.get(var)
        if value:
            logger.debug(f"Using CA bundle from {var}: {value}")
            return value

    return True


def configure_ssl_env() -> None:
    """
    Exports a custom CA bundle as SSL_CERT_FILE so httpx-based SDKs
    (OpenAI, Google GenAI) pick it up as well.
    """
    bundle = get_ca_bundle()
    if isinstance(bundle, str) and os.environ.get("SSL_CERT_FILE") != bundle:
        os.environ["SSL_CERT_FILE"] = bundle
        logger.debug(f"Set SSL_CERT_FILE={bundle} for SDK clients")
