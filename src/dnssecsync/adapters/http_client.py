"""Blocking HTTP session shared by the collaborator adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Self, TypedDict, Unpack

import httpx

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._client import UseClientDefault
    from httpx._types import (
        AuthTypes,
        CookieTypes,
        HeaderTypes,
        QueryParamTypes,
        RequestContent,
        RequestData,
        RequestExtensions,
        RequestFiles,
        TimeoutTypes,
        URLTypes,
    )

    from dnssecsync.config.http import HttpClientConfig, RequestHook, ResponseHook


class RequestOptions(TypedDict, total=False):
    content: RequestContent | None
    data: RequestData | None
    files: RequestFiles | None
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None
    cookies: CookieTypes | None
    auth: AuthTypes | UseClientDefault | None
    follow_redirects: bool | UseClientDefault
    timeout: TimeoutTypes | UseClientDefault
    extensions: RequestExtensions | None


class ClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    verify: bool
    headers: HeaderTypes
    event_hooks: dict[str, list[RequestHook] | list[ResponseHook]]
    transport: httpx.BaseTransport


class HttpClient:
    """One collaborator session: a cookie-keeping ``httpx.Client`` closed on exit."""

    def __init__(
        self,
        config: HttpClientConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config

        client_kwargs: ClientOptions = {
            "timeout": config.timeout_seconds,
            "verify": config.verify_tls,
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers:
            client_kwargs["headers"] = dict(config.default_headers)
        event_hooks: dict[str, list[RequestHook] | list[ResponseHook]] = {}
        if config.request_hooks:
            event_hooks["request"] = list(config.request_hooks)
        if config.response_hooks:
            event_hooks["response"] = list(config.response_hooks)
        if event_hooks:
            client_kwargs["event_hooks"] = event_hooks
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.Client(**client_kwargs)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return self._client.request(method, url, **kwargs)

    def post(
        self,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        return self.request("POST", url, **kwargs)
