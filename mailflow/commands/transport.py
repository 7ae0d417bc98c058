"""
Transports for the host command boundary.

The client never talks to IMAP, SMTP or the AI provider itself. It sends a
named command with a JSON argument object to the host process and gets back
either data or an error string. A transport is the piece that moves those
envelopes; swapping it lets the store run against the real host, a test
double, or an offline fixture without changing anything else.
"""
import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from mailflow import config
from mailflow.utils.errors import CommandError, TransportError


logger = logging.getLogger(__name__)


class CommandTransport(ABC):
    """Interface for invoking host commands."""

    @abstractmethod
    async def invoke(self, command: str, args: Optional[Dict[str, Any]] = None) -> Any:
        """
        Invoke a host command.

        Args:
            command: Host command name, e.g. ``"fetch_emails"``.
            args: JSON-serialisable argument object, or None for no arguments.

        Returns:
            The decoded ``data`` payload of a successful call.

        Raises:
            CommandError: If the host reports a failure.
            TransportError: If the call could not be completed.
        """
        pass

    def close(self) -> None:
        """Release any resources held by the transport."""
        pass


class HttpCommandTransport(CommandTransport):
    """
    Transport that POSTs command envelopes to the host's HTTP endpoint.

    Request body: ``{"command": <name>, "args": {...}}``.
    Response body: ``{"ok": true, "data": ...}`` or
    ``{"ok": false, "error": "<message>"}``.

    ``requests`` is blocking, so each call runs on a worker thread and the
    event loop stays free while the host works. Calls go through
    ``requests.post`` rather than a shared session, so concurrent worker
    threads never share connection state.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.url = url or config.COMMAND_URL
        self.timeout = timeout if timeout is not None else config.COMMAND_TIMEOUT_SECONDS

    async def invoke(self, command: str, args: Optional[Dict[str, Any]] = None) -> Any:
        return await asyncio.to_thread(self._post, command, args)

    def _post(self, command: str, args: Optional[Dict[str, Any]]) -> Any:
        payload = {"command": command, "args": args or {}}
        logger.debug("POST %s command=%s", self.url, command)
        try:
            response = requests.post(self.url, json=payload, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Command '{command}' timed out after {self.timeout}s", command) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Command '{command}' failed: {e}", command) from e

        try:
            body = response.json()
        except ValueError:
            if response.status_code != 200:
                raise TransportError(
                    f"Command '{command}' failed with HTTP {response.status_code}", command
                )
            raise TransportError(f"Command '{command}' returned a non-JSON response", command)

        if not isinstance(body, dict) or "ok" not in body:
            raise TransportError(f"Command '{command}' returned a malformed envelope", command)

        if not body["ok"]:
            # The host's error text is written for users; pass it through unchanged
            raise CommandError(str(body.get("error") or "Unknown error"), command)

        return body.get("data")


Handler = Callable[..., Any]


class InMemoryTransport(CommandTransport):
    """
    Transport backed by a table of Python callables.

    Handlers receive the command arguments as keyword arguments and may be
    plain functions or coroutines. Raising from a handler is how a host
    failure is simulated. Every call is recorded in ``calls``.
    """

    def __init__(self, handlers: Optional[Dict[str, Handler]] = None):
        self.handlers: Dict[str, Handler] = dict(handlers or {})
        self.calls: List[Tuple[str, Dict[str, Any]]] = []

    def register(self, command: str, handler: Handler) -> None:
        self.handlers[command] = handler

    def called(self, command: str) -> List[Dict[str, Any]]:
        """Argument objects of every recorded call to ``command``."""
        return [args for name, args in self.calls if name == command]

    async def invoke(self, command: str, args: Optional[Dict[str, Any]] = None) -> Any:
        args = dict(args or {})
        self.calls.append((command, args))
        handler = self.handlers.get(command)
        if handler is None:
            raise CommandError(f"Unknown command: {command}", command)
        result = handler(**args)
        if inspect.isawaitable(result):
            result = await result
        return result
