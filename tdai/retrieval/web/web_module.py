"""Search gateway for volatile questions.

Architectural role:
    Sends one keyword query to an external search provider in the national
    flavour selected by the locale router, and returns a short ordered list of
    `SearchResult(title, url, snippet)` records for scoring and filtering in
    core orchestration.

Provider strategy:
    - `serpapi`: GET `engine=google` with `hl` (interface language), `gl`
      (geo code) and `num`. Reads `organic_results[].{title, link, snippet}`.
    - `brave`: GET with `search_lang`, `country`, `ui_lang` and `count`, plus
      the `X-Subscription-Token` header. Reads `web.results[].{title, url,
      description}`; descriptions carry HTML highlighting that is stripped.

Ranking:
    No score is computed here. Provider order is preserved and truncated to
    `max_results` after dropping non-HTTP and duplicate URLs.

Failure handling:
    No retry loop. Timeouts, transport errors, non-2xx statuses and invalid
    JSON are logged and yield an empty list; callers treat that as "no usable
    results". A missing API key raises at construction.

Security:
    Titles and snippets are untrusted text. Markup and prompt-injection token
    patterns are removed before they reach the prompt.
"""

from __future__ import annotations

import html
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

import httpx

from tdai.core.routing_types import SearchLocale, SearchResult


logger = logging.getLogger(__name__)

SEARCH_KEY_VARIABLES = ("SEARCH_API_KEY", "SERP_API_KEY", "SERPAPI_API_KEY", "BRAVE_API_KEY")


def _search_key_from_env() -> str:
    """Return the first non-empty search key among the supported variable names."""
    for name in SEARCH_KEY_VARIABLES:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return ""


@dataclass(frozen=True)
class WebModuleConfig:
    """Runtime configuration for `WebSearchModule`.

    Relevant environment variables:
        - `WEB_SEARCH_PROVIDER` (`serpapi` or `brave`)
        - `SEARCH_API_KEY` (aliases `SERP_API_KEY`, `SERPAPI_API_KEY`, `BRAVE_API_KEY`)
        - `WEB_TIMEOUT_SECONDS`
        - `WEB_MAX_RESULTS`
        - `WEB_USER_AGENT`
    """

    provider: str = field(default_factory=lambda: os.getenv("WEB_SEARCH_PROVIDER", "serpapi").strip().lower())
    search_api_key: str = field(default_factory=_search_key_from_env)
    timeout_seconds: float = field(default_factory=lambda: float(os.getenv("WEB_TIMEOUT_SECONDS", "10")))
    max_results: int = field(default_factory=lambda: int(os.getenv("WEB_MAX_RESULTS", "5")))
    user_agent: str = field(default_factory=lambda: os.getenv("WEB_USER_AGENT", "tdai/1.0").strip())


class WebSearchModule:
    """Locale-aware keyword search returning titled/linked/snippeted results."""

    _BRAVE_URL = "https://api.search.brave.com/res/v1/web/search"
    _SERPAPI_URL = "https://serpapi.com/search.json"

    SUPPORTED_PROVIDERS = ("serpapi", "brave")

    # Brave expects ISO 3166 country codes.
    _BRAVE_COUNTRY_OVERRIDES = {"uk": "GB"}

    _INJECTION_PATTERNS = (
        r"ignore\s+(?:all\s+)?previous\s+instructions?",
        r"ignore\s+les\s+instructions\s+pr[ée]c[ée]dentes",
        r"\bsystem\s*:",
        r"\bassistant\s*:",
        r"\buser\s*:",
    )

    def __init__(self, config: WebModuleConfig) -> None:
        """Initialize the search gateway.

        Raises:
            RuntimeError: If no search API key is configured or the provider
            is not supported.
        """
        self.config = config
        if not self.config.search_api_key:
            raise RuntimeError("SEARCH_API_KEY not configured")
        if self.config.provider not in self.SUPPORTED_PROVIDERS:
            raise RuntimeError(f"Unsupported WEB_SEARCH_PROVIDER: {self.config.provider}")

    @property
    def provider(self) -> str:
        return self.config.provider

    async def asearch(self, query: str, locale: SearchLocale | None = None) -> list[SearchResult]:
        """Search the provider and return at most `max_results` records.

        Args:
            query: Rewritten search query.
            locale: Target search locale; French/France when omitted.

        Returns:
            Results in provider order, or `[]` on any failure.
        """
        if not query or not query.strip():
            return []

        locale = locale or SearchLocale()
        data = await self._search(query.strip(), locale)
        results = self._parse_search_results(data)
        results = self._unique_http_results(results)

        logger.info(
            "Web search (%s, %s-%s) returned %d result(s) for %r",
            self.config.provider,
            locale.language,
            locale.geo_code,
            len(results),
            query,
        )
        return results

    async def _search(self, query: str, locale: SearchLocale) -> dict[str, Any]:
        """Dispatch the query to the configured provider."""
        if self.config.provider == "serpapi":
            params = self._serpapi_params(query, locale)
            return await self._request_json(self._SERPAPI_URL, self._default_headers(), params)

        params = self._brave_params(query, locale)
        headers = {
            **self._default_headers(),
            "X-Subscription-Token": self.config.search_api_key,
        }
        return await self._request_json(self._BRAVE_URL, headers, params)

    def _serpapi_params(self, query: str, locale: SearchLocale) -> dict[str, Any]:
        return {
            "engine": "google",
            "q": query,
            "hl": locale.interface_language,
            "gl": locale.geo_code,
            "num": self.config.max_results,
            "api_key": self.config.search_api_key,
        }

    def _brave_params(self, query: str, locale: SearchLocale) -> dict[str, Any]:
        country = self._brave_country(locale.geo_code)
        return {
            "q": query,
            "search_lang": locale.language,
            "country": country,
            "ui_lang": f"{locale.interface_language}-{country}",
            "count": self.config.max_results,
        }

    def _brave_country(self, geo_code: str) -> str:
        geo_code = (geo_code or "fr").lower()
        return self._BRAVE_COUNTRY_OVERRIDES.get(geo_code, geo_code.upper())

    async def _request_json(
        self,
        url: str,
        headers: dict[str, str],
        params: dict[str, Any],
    ) -> dict[str, Any]:
        """Execute one GET request and parse the JSON body.

        Returns:
            Parsed JSON object, or `{}` on timeout, transport error, non-2xx
            status, invalid JSON or a non-object body.
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout_seconds,
                follow_redirects=True,
                headers=headers,
            ) as client:
                response = await client.get(url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException:
            logger.warning("%s search timed out after %.1fs", self.config.provider, self.config.timeout_seconds)
            return {}
        except httpx.HTTPStatusError as exc:
            logger.warning("%s search HTTP error (%s)", self.config.provider, exc.response.status_code)
            return {}
        except httpx.RequestError as exc:
            logger.warning("%s search transport error: %s", self.config.provider, type(exc).__name__)
            return {}
        except ValueError:
            logger.warning("%s search returned invalid JSON", self.config.provider)
            return {}

        return data if isinstance(data, dict) else {}

    def _parse_search_results(self, data: dict[str, Any]) -> list[SearchResult]:
        """Extract result records from the provider-specific payload."""
        if self.config.provider == "serpapi":
            candidates = data.get("organic_results") or []
            return [
                self._make_result(item.get("title"), item.get("link"), item.get("snippet"))
                for item in candidates
                if isinstance(item, dict)
            ]

        web = data.get("web")
        candidates = (web.get("results") or []) if isinstance(web, dict) else []
        return [
            self._make_result(item.get("title"), item.get("url"), item.get("description"))
            for item in candidates
            if isinstance(item, dict)
        ]

    def _make_result(self, title, url, snippet) -> SearchResult:
        return SearchResult(
            title=self._clean_text(title),
            url=(url or "").strip(),
            snippet=self._clean_text(snippet),
        )

    def _clean_text(self, text) -> str:
        """Strip markup and prompt-injection tokens from untrusted provider text."""
        if not text:
            return ""
        cleaned = self._strip_html(str(text))
        cleaned = self._remove_prompt_injection_tokens(cleaned)
        return re.sub(r"\s+", " ", cleaned).strip()

    @staticmethod
    def _strip_html(text: str) -> str:
        """Remove markup and unescape entities (`<strong>`, `&amp;`, ...)."""
        text = re.sub(r"<script[^>]*>.*?</script>", " ", text, flags=re.IGNORECASE | re.DOTALL)
        text = re.sub(r"<[^>]+>", "", text)
        return html.unescape(text)

    def _remove_prompt_injection_tokens(self, text: str) -> str:
        cleaned = text
        for pattern in self._INJECTION_PATTERNS:
            cleaned = re.sub(pattern, " ", cleaned, flags=re.IGNORECASE)
        return cleaned

    def _default_headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": self.config.user_agent,
        }

    def _unique_http_results(self, results: list[SearchResult]) -> list[SearchResult]:
        """Drop non-HTTP and duplicate URLs, cap to `max_results`, keep provider order."""
        out: list[SearchResult] = []
        seen: set[str] = set()

        for result in results:
            if not self._is_http_url(result.url):
                continue
            if result.url in seen:
                continue
            seen.add(result.url)
            out.append(result)
            if len(out) >= self.config.max_results:
                break

        return out

    @staticmethod
    def _is_http_url(url: str) -> bool:
        """Return whether a URL is syntactically valid HTTP(S)."""
        try:
            parsed = urlparse(url)
        except ValueError:
            return False
        return parsed.scheme in {"http", "https"} and bool(parsed.netloc)
