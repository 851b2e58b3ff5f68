import asyncio
from ipaddress import ip_address

import pytest

from dualink.dns import DnsResolver, Resolved, Resolving


def _fixed(ips):
    async def lookup(hostname):
        return [ip_address(ip) for ip in ips]

    return lookup


@pytest.mark.asyncio
async def test_resolving_then_resolved():
    resolver = DnsResolver(_fixed(["10.0.0.1", "fd00::1"]))
    resolver.resolve(3, "host")
    assert await resolver.event() == Resolving(3)
    assert await resolver.event() == Resolved(
        3, "host", (ip_address("10.0.0.1"), ip_address("fd00::1"))
    )
    await resolver.terminate()


@pytest.mark.asyncio
async def test_ip_literal_resolves_without_network():
    resolver = DnsResolver()
    resolver.resolve(1, "127.0.0.1")
    assert await resolver.event() == Resolving(1)
    result = await asyncio.wait_for(resolver.event(), 5)
    assert result == Resolved(1, "127.0.0.1", (ip_address("127.0.0.1"),))
    await resolver.terminate()


@pytest.mark.asyncio
async def test_lookup_error_is_reported():
    failure = LookupError("no such host")

    async def lookup(hostname):
        raise failure

    resolver = DnsResolver(lookup)
    resolver.resolve(2, "nowhere")
    assert await resolver.event() == Resolving(2)
    result = await resolver.event()
    assert result.ips == ()
    assert result.error is failure
    await resolver.terminate()


@pytest.mark.asyncio
async def test_new_request_cancels_previous():
    cancelled = asyncio.Event()

    async def lookup(hostname):
        if hostname == "slow":
            try:
                await asyncio.sleep(3600)
            except asyncio.CancelledError:
                cancelled.set()
                raise
        return [ip_address("10.0.0.2")]

    resolver = DnsResolver(lookup)
    resolver.resolve(1, "slow")
    await asyncio.sleep(0)
    resolver.resolve(1, "fast")
    events = [await resolver.event() for _ in range(3)]
    assert events == [
        Resolving(1),
        Resolving(1),
        Resolved(1, "fast", (ip_address("10.0.0.2"),)),
    ]
    await asyncio.wait_for(cancelled.wait(), 1)
    assert cancelled.is_set()
    await resolver.terminate()


@pytest.mark.asyncio
async def test_different_handles_resolve_independently():
    resolver = DnsResolver(_fixed(["10.0.0.3"]))
    resolver.resolve(1, "a")
    resolver.resolve(2, "b")
    events = [await resolver.event() for _ in range(4)]
    resolved = {e.handle for e in events if isinstance(e, Resolved)}
    assert resolved == {1, 2}
    await resolver.terminate()


@pytest.mark.asyncio
async def test_terminate_cancels_pending_and_rejects_requests():
    cancelled = asyncio.Event()

    async def lookup(hostname):
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            cancelled.set()
            raise
        return []

    resolver = DnsResolver(lookup)
    resolver.resolve(1, "slow")
    await asyncio.sleep(0)
    await resolver.terminate()
    assert cancelled.is_set()
    with pytest.raises(RuntimeError):
        resolver.resolve(1, "again")