import logging
import sys
from time import perf_counter

from datacom_api._version import VERSION
from datacom_api.config import get_runtime_defaults
from datacom_api.errors import WebserviceError
from datacom_api.service.transport import build_session, resolve_proxy_url
from datacom_api.util.json import json_loads
from datacom_api.util.logging import log_structured_event

LOG = logging.getLogger(__name__)
_ERROR_PREVIEW_MAX_CHARS = 2048


def _preview_for_error(text, max_chars=_ERROR_PREVIEW_MAX_CHARS):
    if isinstance(text, (bytes, bytearray)):
        text = text.decode("utf-8", errors="replace")
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...<truncated>"


def _server_error_message(content):
    """Pull the errorMsg out of an error body such as [{"errorCode": ..., "errorMsg": ...}]."""
    try:
        payload = json_loads(content)
    except Exception:
        return _preview_for_error(content)
    if isinstance(payload, list) and payload:
        payload = payload[0]
    if isinstance(payload, dict):
        for key in ("errorMsg", "error", "message"):
            if payload.get(key):
                return str(payload[key])
    return _preview_for_error(content)


class WebserviceOpener(object):
    """
    Issues authenticated GET requests against the search service
    ============================================================

    The API token travels as the C{token} query parameter. Responses
    are decoded from JSON; HTTP errors become L{WebserviceError}.
    """

    USER_AGENT = "datacom-api/{0} python/{1}.{2}".format(VERSION, sys.version_info[0], sys.version_info[1])

    def __init__(
        self,
        token=None,
        *,
        session=None,
        timeout=None,
        verify_tls=True,
        proxy_url=None,
    ):
        self.token = token
        self.proxy_url = resolve_proxy_url(proxy_url)
        self._timeout = self._normalize_timeout(timeout)
        self._verify_tls = verify_tls
        if session is not None:
            self._session = session
        else:
            self._session = build_session(proxy_url=self.proxy_url, user_agent=self.USER_AGENT)

    @staticmethod
    def _normalize_timeout(timeout):
        service_defaults = get_runtime_defaults().service_defaults
        if timeout is None:
            timeout = service_defaults.request_timeout_seconds
        if isinstance(timeout, (tuple, list)):
            if len(timeout) != 2:
                raise ValueError("timeout tuple/list must contain exactly (connect_timeout, read_timeout)")
            return (timeout[0], timeout[1])
        value = float(timeout)
        if value <= 0:
            raise ValueError("timeout must be > 0")
        connect_timeout = min(float(service_defaults.connect_timeout_seconds), value)
        return (connect_timeout, value)

    @property
    def session(self):
        return self._session

    def headers(self):
        return {"User-Agent": self.USER_AGENT, "Accept": "application/json"}

    def prepare_params(self, params):
        prepared = dict(params or {})
        if self.token:
            prepared["token"] = self.token
        return prepared

    def get_json(self, url, params=None):
        started = perf_counter()
        try:
            resp = self._session.get(
                url,
                params=self.prepare_params(params),
                headers=self.headers(),
                timeout=self._timeout,
                verify=self._verify_tls,
            )
        except Exception as e:
            raise WebserviceError("Request failed", 0, str(e), str(e)) from e

        try:
            if resp.status_code >= 400:
                handler = {
                    400: self.http_error_400,
                    403: self.http_error_403,
                    404: self.http_error_404,
                }.get(resp.status_code, self.http_error_default)
                handler(url, resp.content, resp.status_code, resp.reason)
            content = resp.content
        finally:
            resp.close()

        if LOG.isEnabledFor(logging.DEBUG):
            log_structured_event(
                LOG,
                logging.DEBUG,
                "webservice_get",
                url=url,
                status=resp.status_code,
                bytes_read=len(content or b""),
                elapsed_ms=round((perf_counter() - started) * 1000.0, 3),
            )

        try:
            return json_loads(content)
        except Exception as e:
            raise WebserviceError(
                "Response was not valid JSON", resp.status_code, resp.reason, _preview_for_error(content)
            ) from e

    def http_error_default(self, url, content, errcode, errmsg):
        raise WebserviceError("Request to %s failed" % url, errcode, errmsg, _server_error_message(content))

    def http_error_400(self, url, content, errcode, errmsg):
        """
        Handle 400 HTTP errors
        ======================

        400 errors mean something about the request was wrong, usually
        a search parameter the service did not accept.
        """
        raise WebserviceError(
            "There was a problem with our request", errcode, errmsg, _server_error_message(content)
        )

    def http_error_403(self, url, content, errcode, errmsg):
        raise WebserviceError(
            "The token was rejected or lacks access to this resource",
            errcode,
            errmsg,
            _server_error_message(content),
        )

    def http_error_404(self, url, content, errcode, errmsg):
        raise WebserviceError("No such resource: %s" % url, errcode, errmsg, _server_error_message(content))
