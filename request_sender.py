import asyncio
import logging
import threading

from app_state import ResponseMetadata
from history_manager import HistoryEntry, RequestRecord, ResponseRecord
from request_dispatch import (
    TransportError,
    dispatch,
    format_response_body,
    prepare_request,
)

logger = logging.getLogger(__name__)

TRUNCATED_MARKER = "\n\n[response truncated]"


class SendState:
    def __init__(self, prepared):
        self.prepared = prepared
        self.done = False
        self.result = None
        self.error = None


class RequestSender:
    """Runs one request at a time off the input loop; ``poll`` applies the outcome.

    With ``background=False`` the request runs to completion inside ``send``,
    which is how the tests drive it.
    """

    def __init__(self, state, dispatch_fn=dispatch, background=True, transport=None):
        self.state = state
        self.dispatch_fn = dispatch_fn
        self.background = background
        self.transport = transport
        self.pending: SendState | None = None

    def send(self) -> bool:
        st = self.state
        if not st.url.strip():
            logger.debug("Cannot send request: URL is empty")
            return False
        if self.pending is not None:
            st.set_status("A request is already in flight", 2)
            return False

        prepared = prepare_request(st)
        self.pending = SendState(prepared)
        st.request_in_flight = True
        st.set_status(f"Sending {prepared.method} {prepared.url}", 30)
        logger.debug("Sending request to %s with method %s", prepared.url, prepared.method)

        if self.background:
            t = threading.Thread(target=self._run, args=(self.pending,), daemon=True)
            t.start()
        else:
            self._run(self.pending)
            self.poll()
        return True

    def _run(self, job: SendState):
        cfg = self.state.config
        try:
            job.result = asyncio.run(
                self.dispatch_fn(
                    job.prepared.method,
                    job.prepared.url,
                    job.prepared.headers,
                    job.prepared.body,
                    timeout=cfg.get("TIMEOUT_SECONDS", 30.0),
                    connect_timeout=cfg.get("CONNECT_TIMEOUT_SECONDS", 10.0),
                    transport=self.transport,
                )
            )
        except TransportError as e:
            job.error = e
        except Exception as e:
            logger.exception("Unexpected failure while sending %s", job.prepared.url)
            job.error = e
        finally:
            job.done = True

    def poll(self) -> bool:
        """Apply a finished request to the state; True when something changed."""
        job = self.pending
        if job is None or not job.done:
            return False
        self.pending = None
        st = self.state
        st.request_in_flight = False
        st.response_scroll = 0

        prepared = job.prepared
        request = RequestRecord(
            url=prepared.url,
            method=prepared.method,
            headers=dict(prepared.headers),
            body=prepared.body or None,
        )

        if job.error is not None or job.result is None:
            st.response = f"Error: {job.error}"
            st.response_metadata = None
            st.set_status("Request failed", 3)
            record = None
        else:
            res = job.result
            body = res.body
            limit = st.config.get("MAX_RESPONSE_SIZE")
            if limit and len(body) > limit:
                body = body[:limit] + TRUNCATED_MARKER
            content_type = _header(res.headers, "content-type")
            st.response = format_response_body(content_type, body)
            st.response_metadata = ResponseMetadata(
                status=res.status,
                status_text=res.status_text,
                elapsed_ms=res.elapsed_ms,
                size_bytes=res.size_bytes,
                response_headers=dict(res.headers),
            )
            st.set_status(res.status_text, 3)
            record = ResponseRecord(
                status=res.status,
                status_text=res.status_text,
                headers=dict(res.headers),
                body=res.body,
                time_ms=res.elapsed_ms,
                size_bytes=res.size_bytes,
            )

        if not st.history.append(HistoryEntry.now(request, record)):
            st.set_status("History not saved, write failed", 4)
        return True


def _header(headers, name):
    for key, value in (headers or {}).items():
        if key.lower() == name:
            return value
    return ""
