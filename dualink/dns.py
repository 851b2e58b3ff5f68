"""Background hostname resolution for clients."""

from __future__ import annotations

import asyncio
import ipaddress
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable

import dns.asyncresolver

IpAddress = ipaddress.IPv4Address | ipaddress.IPv6Address
Lookup = Callable[[str], Awaitable[Iterable[IpAddress]]]


@dataclass(frozen=True)
class Resolving:
    """Resolution of a client's hostname has started."""

    handle: int


@dataclass(frozen=True)
class Resolved:
    """Resolution finished; ``error`` is set when it failed."""

    handle: int
    hostname: str
    ips: tuple[IpAddress, ...]
    error: Exception | None = None


DnsEvent = Resolving | Resolved


async def _lookup_ip(hostname: str) -> list[IpAddress]:
    try:
        return [ipaddress.ip_address(hostname)]
    except ValueError:
        pass
    resolver = dns.asyncresolver.Resolver()
    results = await asyncio.gather(
        *(resolver.resolve(hostname, rdtype) for rdtype in ("A", "AAAA")),
        return_exceptions=True,
    )
    ips: list[IpAddress] = []
    errors: list[BaseException] = []
    for result in results:
        if isinstance(result, BaseException):
            errors.append(result)
        else:
            ips.extend(ipaddress.ip_address(rr.address) for rr in result)
    if not ips and errors:
        raise errors[0]
    return ips


class DnsResolver:
    """Resolves hostnames per client handle, reporting results as events.

    A new request for a handle cancels the one still running for it.
    """

    def __init__(self, lookup: Lookup | None = None) -> None:
        self._lookup = lookup or _lookup_ip
        self._events: asyncio.Queue[DnsEvent] = asyncio.Queue()
        self._tasks: dict[int, asyncio.Task[None]] = {}
        self._terminated = False

    def resolve(self, handle: int, hostname: str) -> None:
        """Start resolving ``hostname`` for ``handle``."""
        if self._terminated:
            raise RuntimeError("resolver terminated")
        previous = self._tasks.pop(handle, None)
        if previous is not None and not previous.done():
            previous.cancel()
        self._events.put_nowait(Resolving(handle))
        self._tasks[handle] = asyncio.get_running_loop().create_task(
            self._run(handle, hostname)
        )

    async def _run(self, handle: int, hostname: str) -> None:
        try:
            ips = await self._lookup(hostname)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._events.put_nowait(Resolved(handle, hostname, (), e))
        else:
            self._events.put_nowait(Resolved(handle, hostname, tuple(ips)))

    async def event(self) -> DnsEvent:
        """Wait for the next resolution event."""
        return await self._events.get()

    async def terminate(self) -> None:
        """Cancel all pending lookups and wait for them to end."""
        self._terminated = True
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)