from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from anka_builder.errors import (
    MalformedOutputError,
    RegistryTransportError,
    ToolDomainError,
    UnsupportedResponseError,
)
from anka_builder.models import (
    CommandResult,
    RegistryListResponse,
    RegistryParams,
    RegistryPushParams,
)
from .output import parse_body, parse_output

logger = logging.getLogger(__name__)


def _registry_args(params: RegistryParams) -> list[str]:
    args: list[str] = []
    if params.registry_name:
        args += ["--remote", params.registry_name]
    if params.registry_url:
        args += ["--registry-path", params.registry_url]
    if params.node_cert_path:
        args += ["--cert", params.node_cert_path]
    if params.node_key_path:
        args += ["--key", params.node_key_path]
    if params.ca_root_path:
        args += ["--cacert", params.ca_root_path]
    if params.is_insecure:
        args.append("--insecure")
    return args


def _tls_kwargs(params: RegistryParams | None) -> dict[str, Any]:
    """requests kwargs for mutual TLS against the registry."""
    if params is None:
        return {}
    kwargs: dict[str, Any] = {}
    if params.node_cert_path and params.node_key_path:
        kwargs["cert"] = (params.node_cert_path, params.node_key_path)
    elif params.node_cert_path:
        kwargs["cert"] = params.node_cert_path
    if params.is_insecure:
        kwargs["verify"] = False
    elif params.ca_root_path:
        kwargs["verify"] = params.ca_root_path
    return kwargs


class RegistryMixin:
    """
    Registry operations. `list` and `push` go through the anka CLI,
    `revert` goes straight to the registry REST API.
    """

    session: requests.Session
    timeout: float

    def invoke(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        raise NotImplementedError

    def _run_registry_command(
        self, params: RegistryParams, args: Sequence[str]
    ) -> CommandResult:
        """anka registry <connection flags> <args...>"""
        return self.invoke("registry", [*_registry_args(params), *args])

    def registry_list(self, params: RegistryParams) -> list[RegistryListResponse]:
        output = self._run_registry_command(params, ["list"])
        if not output.ok:
            logger.error(
                "Error executing registry list command: %s %s",
                output.exception_type,
                output.message,
            )
            raise ToolDomainError(output.message or "", output.exception_type)

        if not isinstance(output.body, list):
            raise MalformedOutputError(
                "registry list body is not a list", str(output.body)
            )
        return [
            parse_body("registry list", RegistryListResponse, item)
            for item in output.body
        ]

    def registry_push(
        self,
        params: RegistryParams,
        push_params: RegistryPushParams,
    ) -> None:
        args = ["push"]
        if push_params.tag:
            args += ["--tag", push_params.tag]
        if push_params.description:
            args += ["--description", push_params.description]
        if push_params.remote_vm:
            args += ["--remote-vm", push_params.remote_vm]
        if push_params.local:
            args.append("--local")
        args.append(push_params.vm_id)

        output = self._run_registry_command(params, args)
        if not output.ok:
            logger.error(
                "Error executing registry push command: %s %s",
                output.exception_type,
                output.message,
            )
            raise ToolDomainError(output.message or "", output.exception_type)

    def registry_revert(
        self,
        url: str,
        vm_id: str,
        params: RegistryParams | None = None,
    ) -> None:
        """DELETE <url>/registry/revert?id=<vm_id>"""
        response = self._registry_rest_request(
            "DELETE",
            f"{url.rstrip('/')}/registry/revert",
            params,
            query={"id": vm_id},
        )
        if not response.ok:
            raise ToolDomainError(
                f"failed to revert VM on registry: {response.message}",
                response.exception_type,
            )

    def _registry_rest_request(
        self,
        method: str,
        url: str,
        params: RegistryParams | None = None,
        query: dict[str, str] | None = None,
    ) -> CommandResult:
        logger.debug("[API REQUEST] [%s] %s %s", method, url, query or "")
        try:
            resp = self.session.request(
                method,
                url,
                params=query,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
                **_tls_kwargs(params),
            )
        except requests.RequestException as e:
            logger.error("Registry request %s %s failed: %s", method, url, e)
            raise RegistryTransportError(f"registry request failed: {e}") from e
        if resp.status_code != 200:
            raise UnsupportedResponseError(resp.status_code)

        logger.debug("[API RESPONSE] %s", resp.text)
        return parse_output(resp.content)
