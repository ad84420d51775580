import json
import logging
import time
import uuid
from dataclasses import dataclass, field

import httpx

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Timeout, connection or protocol failure while sending a request."""


@dataclass
class PreparedRequest:
    method: str
    url: str
    headers: dict
    body: str


@dataclass
class DispatchResult:
    status: int
    status_text: str
    headers: dict = field(default_factory=dict)
    body: str = ""
    elapsed_ms: int = 0
    size_bytes: int = 0


def normalize_url(url: str) -> str:
    url = url.strip()
    if not (url.startswith("http://") or url.startswith("https://")):
        url = f"http://{url}"
    return url


def url_host(url: str):
    try:
        host = httpx.URL(url).host
    except (httpx.InvalidURL, ValueError, TypeError):
        return None
    return host or None


def prepare_request(state) -> PreparedRequest:
    """Normalize the URL and refresh derived headers on ``state``.

    The state itself is updated (scheme, Host, Random-Token, Content-Length),
    and the returned request carries only the enabled headers.
    """
    state.url = normalize_url(state.url)
    host = url_host(state.url)
    if host:
        state.headers["Host"] = host
    state.headers["Random-Token"] = str(uuid.uuid4())
    body_len = len(state.body.encode("utf-8"))
    state.headers["Content-Length"] = str(body_len)

    headers = state.enabled_headers()
    logger.debug("Prepared %s %s with headers %s", state.method.value, state.url, headers)
    return PreparedRequest(state.method.value, state.url, headers, state.body)


def format_response_body(content_type: str, body: str) -> str:
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime == "application/json" or mime.endswith("+json"):
        try:
            return json.dumps(json.loads(body), indent=2, ensure_ascii=False)
        except ValueError:
            return body
    return body


async def dispatch(
    method,
    url,
    headers,
    body,
    *,
    timeout=30.0,
    connect_timeout=10.0,
    transport=None,
) -> DispatchResult:
    timeouts = httpx.Timeout(timeout, connect=min(connect_timeout, timeout))
    content = body.encode("utf-8") if body else None
    start = time.monotonic()
    try:
        async with httpx.AsyncClient(
            timeout=timeouts, verify=False, transport=transport
        ) as client:
            response = await client.request(method, url, headers=headers, content=content)
    except httpx.TimeoutException as e:
        logger.error("Request timed out: %s", e)
        raise TransportError(f"request timed out ({e})") from e
    except httpx.ConnectError as e:
        logger.error("Connection error: %s", e)
        raise TransportError(f"connection failed ({e})") from e
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("Request failed: %s", e)
        raise TransportError(str(e) or e.__class__.__name__) from e
    except UnicodeEncodeError as e:
        logger.error("Header encoding failed: %s", e)
        raise TransportError(f"invalid header value ({e})") from e

    elapsed_ms = int((time.monotonic() - start) * 1000)
    text = response.text
    logger.info("Response received: %s %s", response.status_code, response.reason_phrase)
    return DispatchResult(
        status=response.status_code,
        status_text=f"{response.status_code} {response.reason_phrase}".strip(),
        headers=dict(response.headers.items()),
        body=text,
        elapsed_ms=elapsed_ms,
        size_bytes=len(response.content),
    )
