import asyncio
import gc

import pytest

from devevents.db import ConnectionCache, ConnectionError

class FakeHandle:
    def __init__(self, name="primary"):
        self.name = name
        self.ready = True
        self.closed = False

    def is_ready(self):
        return self.ready

    async def close(self):
        self.ready = False
        self.closed = True

    def info(self):
        return {'driver': 'fake', 'database': self.name, 'host': None, 'port': None}

class FakeConnector:
    """Connect factory that can be held open and told to fail."""

    def __init__(self):
        self.calls = 0
        self.failures = []
        self.gate = asyncio.Event()
        self.gate.set()
        self.handles = []

    async def __call__(self):
        self.calls += 1
        await self.gate.wait()
        if self.failures:
            raise self.failures.pop(0)
        handle = FakeHandle(f"handle-{self.calls}")
        self.handles.append(handle)
        return handle

@pytest.mark.asyncio
async def test_concurrent_cold_acquires_share_one_connect():
    connector = FakeConnector()
    connector.gate.clear()
    cache = ConnectionCache(connector)

    waiters = [asyncio.ensure_future(cache.acquire()) for _ in range(10)]
    await asyncio.sleep(0)
    assert cache.state == 'connecting'

    connector.gate.set()
    handles = await asyncio.gather(*waiters)

    assert connector.calls == 1
    assert all(handle is handles[0] for handle in handles)
    assert cache.state == 'ready'

@pytest.mark.asyncio
async def test_ready_handle_is_reused_without_connecting():
    connector = FakeConnector()
    cache = ConnectionCache(connector)

    first = await cache.acquire()
    second = await cache.acquire()

    assert first is second
    assert connector.calls == 1
    assert cache.is_ready()

@pytest.mark.asyncio
async def test_failure_reaches_every_waiter_and_allows_retry():
    connector = FakeConnector()
    connector.failures.append(ConnectionError("server selection timed out"))
    connector.gate.clear()
    cache = ConnectionCache(connector)

    waiters = [asyncio.ensure_future(cache.acquire()) for _ in range(3)]
    await asyncio.sleep(0)
    connector.gate.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert connector.calls == 1
    assert all(isinstance(result, ConnectionError) for result in results)
    assert cache.state == 'unconnected'
    assert not cache.is_ready()

    handle = await cache.acquire()
    assert connector.calls == 2
    assert handle.is_ready()

@pytest.mark.asyncio
async def test_degraded_handle_is_replaced_on_next_acquire():
    connector = FakeConnector()
    cache = ConnectionCache(connector)

    stale = await cache.acquire()
    stale.ready = False  # connection dropped

    assert not cache.is_ready()
    fresh = await cache.acquire()

    assert fresh is not stale
    assert stale.closed
    assert connector.calls == 2

@pytest.mark.asyncio
async def test_release_closes_and_forgets_handle():
    connector = FakeConnector()
    cache = ConnectionCache(connector)
    handle = await cache.acquire()

    await cache.release()

    assert handle.closed
    assert cache.state == 'unconnected'
    assert await cache.acquire() is not handle
    assert connector.calls == 2

@pytest.mark.asyncio
async def test_release_without_handle_is_a_no_op():
    cache = ConnectionCache(FakeConnector())
    await cache.release()
    assert cache.state == 'unconnected'

@pytest.mark.asyncio
async def test_release_while_connecting_fails_waiters():
    connector = FakeConnector()
    connector.gate.clear()
    cache = ConnectionCache(connector)

    waiter = asyncio.ensure_future(cache.acquire())
    await asyncio.sleep(0)
    await cache.release()

    with pytest.raises(ConnectionError):
        await waiter
    assert cache.state == 'unconnected'

@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_shared_attempt():
    connector = FakeConnector()
    connector.gate.clear()
    cache = ConnectionCache(connector)

    impatient = asyncio.ensure_future(cache.acquire())
    patient = asyncio.ensure_future(cache.acquire())
    await asyncio.sleep(0)

    impatient.cancel()
    with pytest.raises(asyncio.CancelledError):
        await impatient

    connector.gate.set()
    handle = await patient

    assert handle.is_ready()
    assert connector.calls == 1

@pytest.mark.asyncio
async def test_connection_info_reports_state():
    cache = ConnectionCache(FakeConnector())
    assert cache.connection_info() == {
        'isConnected': False,
        'state': 'unconnected',
        'connectAttempts': 0,
    }

    await cache.acquire()
    info = cache.connection_info()

    assert info['isConnected'] is True
    assert info['state'] == 'ready'
    assert info['connectAttempts'] == 1
    assert info['driver'] == 'fake'

@pytest.mark.asyncio
async def test_failure_after_all_waiters_left_is_not_reported_unretrieved():
    reported = []
    asyncio.get_running_loop().set_exception_handler(lambda loop, context: reported.append(context))
    connector = FakeConnector()
    connector.gate.clear()
    connector.failures.append(ConnectionError("refused"))
    cache = ConnectionCache(connector)

    waiter = asyncio.ensure_future(cache.acquire())
    await asyncio.sleep(0)
    waiter.cancel()
    with pytest.raises(asyncio.CancelledError):
        await waiter

    connector.gate.set()
    for _ in range(5):
        await asyncio.sleep(0)
    assert cache.state == 'unconnected'

    del waiter
    gc.collect()
    assert not [context for context in reported if 'never retrieved' in context['message']]
