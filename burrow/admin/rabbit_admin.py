import logging
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar
from urllib.parse import quote

import requests
import yarl
from pydantic import BaseModel, TypeAdapter, ValidationError

from burrow.exceptions.admin_exceptions import AdminError
from burrow.exceptions.base_exceptions import (
    ConfigurationError,
    DecodeError,
    TransportError,
)
from burrow.model.get_messages_request import GetMessagesRequest
from burrow.model.publish import PublishRequest, PublishResponse, PurgeRequest
from burrow.model.queue_info import QueueInfo
from burrow.tools.urls import censor_credentials

_log = logging.getLogger(__name__)

_TModel = TypeVar("_TModel", bound=BaseModel)

_MessageList = TypeAdapter(List[Dict[str, Any]])
_JsonObject = TypeAdapter(Dict[str, Any])

# Every call gets its own connection.
_HEADERS = {
    "Content-Type": "application/json",
    "Connection": "close",
}


class _ErrorBody(BaseModel):
    error: str = ""
    reason: str = ""


def _quote(segment: str) -> str:
    return quote(segment, safe="")


def _parse_admin_url(admin_url: str) -> yarl.URL:
    try:
        url = yarl.URL(admin_url)

        # Accessing the port forces yarl to validate it.
        _ = url.port
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid management URL: {exc}") from exc

    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigurationError(
            f"Invalid management URL {censor_credentials(admin_url)!r}: "
            "expected http(s)://[user:password@]host[:port][/path]"
        )

    return url


def _raise_for_status(response: requests.Response) -> None:
    if response.status_code < 400:
        return

    try:
        body = _ErrorBody.model_validate_json(response.content)
    except ValidationError as exc:
        raise AdminError(
            response.status_code,
            f"Error {response.status_code} from RabbitMQ: {exc}",
        ) from None

    raise AdminError(response.status_code, body.error, body.reason)


class RabbitAdmin:
    """
    Minimal client for the RabbitMQ management HTTP API.

    Only covers what tests need: getting messages off a queue, purging it,
    reading its stats, and publishing to the default exchange.

    The client never retries; see `QueueDrainer` for polling.
    """

    def __init__(self, admin_url: str, *, timeout: Optional[float] = None) -> None:
        url = _parse_admin_url(admin_url)

        _log.debug("Using management API at %s", censor_credentials(admin_url))

        self._auth: Optional[Tuple[str, str]] = None
        if url.user is not None:
            self._auth = (url.user, url.password or "")

        self._base_url = str(
            url.with_user(None).with_query(None).with_fragment(None)
        ).rstrip("/")

        # No timeout by default: a hung broker blocks the caller.
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def get_messages(
        self, queue: str, request: Optional[GetMessagesRequest] = None
    ) -> List[Dict[str, Any]]:
        if request is None:
            request = GetMessagesRequest()

        path = f"/queues/{_quote(request.vhost)}/{_quote(queue)}/get"

        content = self._call("POST", path, request)

        try:
            return _MessageList.validate_json(content)
        except ValidationError as exc:
            raise DecodeError(
                f"Invalid response getting messages from queue {queue!r}: {exc}"
            ) from exc

    def purge_queue(self, queue: str, vhost: str = "/") -> None:
        path = f"/queues/{_quote(vhost)}/{_quote(queue)}/contents"

        self._call("DELETE", path, PurgeRequest(vhost=vhost, name=queue))

        _log.debug("Purged queue=%r (vhost=%r)", queue, vhost)

    def get_queue(self, queue: str, vhost: str = "/") -> QueueInfo:
        path = f"/queues/{_quote(vhost)}/{_quote(queue)}"

        return self._decode(QueueInfo, self._call("GET", path))

    def publish(self, routing_key: str, body: str, vhost: str = "/") -> PublishResponse:
        path = f"/exchanges/{_quote(vhost)}/amq.default/publish"

        request = PublishRequest(routing_key=routing_key, payload=body)

        content = self._call("POST", path, request)

        # Any 2xx is a successful publish, whatever the body says.
        try:
            response = PublishResponse.model_validate_json(content or b"{}")
        except ValidationError as exc:
            _log.debug("Ignoring unexpected publish response %r: %s", content, exc)
            response = PublishResponse()

        if not response.routed:
            _log.warning(
                "Message published with routing_key=%r (vhost=%r) was not routed to any queue",
                routing_key,
                vhost,
            )

        return response

    def overview(self) -> Dict[str, Any]:
        content = self._call("GET", "/overview")

        try:
            return _JsonObject.validate_json(content)
        except ValidationError as exc:
            raise DecodeError(f"Invalid overview response: {exc}") from exc

    def _decode(self, model: Type[_TModel], content: bytes) -> _TModel:
        try:
            return model.model_validate_json(content)
        except ValidationError as exc:
            raise DecodeError(f"Invalid {model.__name__} response: {exc}") from exc

    def _call(
        self, method: str, path: str, body: Optional[BaseModel] = None
    ) -> bytes:
        url = self._base_url + path

        data = None
        if body is not None:
            data = body.model_dump_json()

        try:
            response = requests.request(
                method,
                url,
                data=data,
                headers=_HEADERS,
                auth=self._auth,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        try:
            _log.debug("%s %s -> %r", method, url, response.status_code)

            _raise_for_status(response)

            return response.content
        finally:
            response.close()

    def __repr__(self) -> str:
        user = self._auth[0] if self._auth is not None else None
        return f"RabbitAdmin(base_url={self._base_url!r}, user={user!r})"
