import sys, os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import asyncio
import socket
import threading

import pytest

from hostquery import (
    ErrorDomain,
    HostAddressQuery,
    HostAddressQueryDelegate,
    QueryState,
    StreamError,
    SystemResolverBackend,
    UnknownHostError,
    resolve,
    run_in_executor,
    shutdown_executor,
)

from test_query import ADDRESSES, FakeBackend, Recorder


def test_run_in_executor_executes():
    loop = asyncio.new_event_loop()
    results = []

    def done(result, exc):
        results.append((result, exc, threading.current_thread() is threading.main_thread()))
        loop.stop()

    run_in_executor(loop, lambda: 40 + 2, callback=done)
    loop.run_forever()
    loop.close()

    assert results == [(42, None, True)]


def test_run_in_executor_reports_exceptions():
    loop = asyncio.new_event_loop()
    results = []

    def fail():
        raise OSError(5, "io")

    def done(result, exc):
        results.append((result, exc))
        loop.stop()

    run_in_executor(loop, fail, callback=done)
    loop.run_forever()
    loop.close()

    [(result, exc)] = results
    assert result is None
    assert isinstance(exc, OSError)


def test_resolve_localhost():
    backend = SystemResolverBackend()
    addresses = asyncio.run(resolve("localhost", backend=backend, timeout=10))

    assert addresses
    assert all(record.family in (socket.AF_INET, socket.AF_INET6) for record in addresses)
    assert len(set(addresses)) == len(addresses)
    assert backend.in_flight == 0


def test_system_backend_rejects_bad_names_at_start():
    backend = SystemResolverBackend()
    query = HostAddressQuery("a" * 64 + ".example", backend)
    recorder = Recorder()
    query.delegate = recorder
    loop = asyncio.new_event_loop()

    with pytest.raises(UnknownHostError) as info:
        query.start(loop)
    loop.close()

    assert info.value.raw_code == socket.EAI_NONAME
    assert query.state is QueryState.STOPPED
    assert backend.in_flight == 0
    assert recorder.events == []


def test_system_backend_cancel_drops_late_result():
    backend = SystemResolverBackend()
    query = HostAddressQuery("localhost", backend)
    recorder = Recorder()
    query.delegate = recorder
    loop = asyncio.new_event_loop()

    query.start(loop)
    assert backend.in_flight == 1
    query.cancel()
    assert backend.in_flight == 0

    # give the worker thread time to post its result back
    loop.call_later(0.5, loop.stop)
    loop.run_forever()
    loop.close()

    assert recorder.events == []
    assert query.addresses == []


def test_resolve_with_backend():
    backend = FakeBackend()

    async def main():
        task = asyncio.ensure_future(resolve("example.com", backend=backend))
        await asyncio.sleep(0)
        backend.handles[0].complete()
        return await task

    assert asyncio.run(main()) == ADDRESSES


def test_resolve_raises_classified_error():
    backend = FakeBackend()

    async def main():
        task = asyncio.ensure_future(resolve("nowhere.example", backend=backend))
        await asyncio.sleep(0)
        backend.handles[0].complete(StreamError(ErrorDomain.NET_DB, socket.EAI_NONAME))
        return await task

    with pytest.raises(UnknownHostError):
        asyncio.run(main())


def test_resolve_timeout_cancels_query():
    backend = FakeBackend()

    with pytest.raises(TimeoutError):
        asyncio.run(resolve("slow.example", backend=backend, timeout=0.01))

    handle = backend.handles[0]
    assert handle.calls.count("unschedule") == 1
    assert handle.client is None


def test_resolve_task_cancellation_cancels_query():
    backend = FakeBackend()

    async def main():
        task = asyncio.ensure_future(resolve("example.com", backend=backend))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(main())
    handle = backend.handles[0]
    assert handle.calls.count("unschedule") == 1
    assert handle.client is None


def test_delegate_base_methods_are_noops():
    delegate = HostAddressQueryDelegate()
    assert delegate.on_success(None, []) is None
    assert delegate.on_failure(None, UnknownHostError(8)) is None


def test_bad_executor_setting_does_not_leave_query_running(monkeypatch):
    shutdown_executor()
    monkeypatch.setenv("HOSTQUERY_EXECUTOR_WORKERS", "many")
    backend = SystemResolverBackend()
    query = HostAddressQuery("localhost", backend)
    loop = asyncio.new_event_loop()

    try:
        with pytest.raises(ValueError):
            query.start(loop)
    finally:
        loop.close()

    assert query.state is QueryState.STOPPED
    assert query.loop is None
    assert backend.in_flight == 0
    query.cancel()
