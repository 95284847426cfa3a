"""HTTP service client for the Gnocchi metric API."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

import requests

SERVICE_TYPE = "metric"

_DEFAULT_OK_CODES: dict[str, tuple[int, ...]] = {
    "GET": (200,),
    "POST": (201, 202),
    "PUT": (201, 202),
    "PATCH": (200, 202, 204),
    "DELETE": (202, 204),
    "HEAD": (204,),
}


class GnocchiError(Exception):
    """Base error raised by this package."""


class UnexpectedStatusError(GnocchiError):
    """The server answered with a status code that was not expected."""

    def __init__(
        self,
        method: str,
        url: str,
        status: int,
        expected: Iterable[int],
        body: str = "",
    ) -> None:
        self.method = method
        self.url = url
        self.status = status
        self.expected = tuple(expected)
        self.body = body
        super().__init__(
            f"Expected HTTP response code {list(self.expected)} when accessing "
            f"[{method} {url}], but got {status} instead: {body}"
        )


def _normalize_url(url: str) -> str:
    return url if url.endswith("/") else url + "/"


class ServiceClient:
    """Sends authenticated JSON requests to one service endpoint."""

    def __init__(
        self,
        endpoint: str,
        token: str = "",
        session: requests.Session | None = None,
        resource_base: str = "",
        service_type: str = "",
    ) -> None:
        self.endpoint = _normalize_url(endpoint)
        self.token = token
        self.session = session if session is not None else requests.Session()
        self.resource_base = resource_base
        self.service_type = service_type

    @property
    def resource_base_url(self) -> str:
        """The base that service URLs are built on."""
        return self.resource_base or self.endpoint

    def service_url(self, *args: str) -> str:
        """Join path parts onto the resource base URL."""
        return self.resource_base_url + "/".join(args)

    def request(
        self,
        method: str,
        url: str,
        json_body: Any = None,
        ok_codes: Iterable[int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> requests.Response:
        """Send a request and raise if the status code is not acceptable."""
        method = method.upper()
        all_headers = {"Accept": "application/json"}
        if self.token:
            all_headers["X-Auth-Token"] = self.token
        if headers:
            all_headers.update(headers)

        kwargs: dict[str, Any] = {"headers": all_headers}
        if json_body is not None:
            kwargs["json"] = json_body

        response = self.session.request(method, url, **kwargs)
        expected = tuple(ok_codes) if ok_codes else _DEFAULT_OK_CODES.get(method, (200,))
        if response.status_code not in expected:
            raise UnexpectedStatusError(
                method, url, response.status_code, expected, response.text
            )
        return response

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GnocchiError(f"unable to decode response body: {exc}") from exc

    def get(
        self,
        url: str,
        ok_codes: Iterable[int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a GET request and return the decoded JSON body."""
        return self._decode(self.request("GET", url, None, ok_codes, headers))

    def post(
        self,
        url: str,
        json_body: Any,
        ok_codes: Iterable[int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a POST request and return the decoded JSON body."""
        return self._decode(self.request("POST", url, json_body, ok_codes, headers))

    def patch(
        self,
        url: str,
        json_body: Any,
        ok_codes: Iterable[int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """Send a PATCH request and return the decoded JSON body."""
        return self._decode(self.request("PATCH", url, json_body, ok_codes, headers))

    def delete(
        self,
        url: str,
        ok_codes: Iterable[int] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Send a DELETE request."""
        self.request("DELETE", url, None, ok_codes, headers)


def new_gnocchi_v1(
    endpoint: str,
    token: str = "",
    session: requests.Session | None = None,
) -> ServiceClient:
    """Create a client for the v1 Gnocchi metric API at the given endpoint."""
    client = ServiceClient(endpoint, token, session, service_type=SERVICE_TYPE)
    client.resource_base = client.endpoint + "v1/"
    return client