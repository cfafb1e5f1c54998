# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Tests for interception proxies created by ProxyFactory."""

import asyncio
import inspect
from abc import ABC, abstractmethod

import pytest

from pyweave.container.exceptions import NoSuchServiceError
from pyweave.interception.decorators import decorate
from pyweave.interception.exceptions import InvalidInterceptorError
from pyweave.interception.metadata import MethodDecorationMap
from pyweave.interception.proxy import InterceptionProxy, ProxyFactory
from pyweave.interception.types import Call
from pyweave.interception.unwrap import unwrap


# ---------------------------------------------------------------------------
# Helper interceptors and services
# ---------------------------------------------------------------------------


class Counting:
    """Counts entries and exits around next()."""

    interception_order = 1

    def __init__(self) -> None:
        self.before = 0
        self.after = 0
        self.calls: list[Call] = []

    async def on_invoke(self, call: Call) -> None:
        self.before += 1
        self.calls.append(call)
        await call.next()
        self.after += 1


class Tracing:
    interception_order = 2

    def __init__(self) -> None:
        self.log: list[str] = []

    async def on_invoke(self, call: Call) -> None:
        self.log.append(f"enter {call.method_name}")
        await call.next()
        self.log.append(f"exit {call.method_name}")


class Backoff:
    """Retries on ConnectionError, sleeping between attempts."""

    interception_order = 0

    async def on_invoke(self, call: Call) -> None:
        for delay in (0.001, 0.002):
            try:
                await call.next()
                return
            except ConnectionError:
                await asyncio.sleep(delay)
        await call.next()


class Timeout:
    interception_order = 0

    async def on_invoke(self, call: Call) -> None:
        await asyncio.wait_for(call.next(), 1)


class Sleeping:
    interception_order = 0

    async def on_invoke(self, call: Call) -> None:
        await asyncio.sleep(0.001)
        await call.next()


class Worker:
    def __init__(self) -> None:
        self.runs = 0

    @decorate(Counting)
    def void(self) -> None:
        self.runs += 1

    @decorate(Counting)
    def value(self, base: int = 40) -> int:
        self.runs += 1
        return base + 2

    @decorate(Counting)
    async def async_void_no_await(self) -> None:
        self.runs += 1

    @decorate(Counting)
    async def async_void_one_await(self) -> None:
        await asyncio.sleep(0)
        self.runs += 1

    @decorate(Counting)
    async def async_value_several_awaits(self) -> int:
        for _ in range(3):
            await asyncio.sleep(0.001)
        self.runs += 1
        return 42

    @decorate(Counting)
    def fail(self) -> None:
        raise LookupError("nothing here")

    @decorate(Counting)
    def returns_awaitable(self):
        return asyncio.sleep(0, result="not awaited")

    def plain(self) -> str:
        return "plain"

    @staticmethod
    def helper() -> str:
        return "static"

    @property
    def name(self) -> str:
        return "worker"


class Slow:
    def __init__(self) -> None:
        self.attempts = 0

    @decorate(Backoff)
    def sync_member(self) -> str:
        self.attempts += 1
        if self.attempts < 3:
            raise ConnectionError("flaky")
        return "sync"

    @decorate(Timeout)
    def timed(self, value: int) -> int:
        return value + 1

    @decorate(Sleeping)
    async def async_member(self) -> str:
        return "async"


class Greeter(ABC):
    @decorate(Tracing)
    @abstractmethod
    def greet(self, name: str) -> str: ...


class FriendlyGreeter(Greeter):
    @decorate(Counting)
    def greet(self, name: str) -> str:
        return f"Hello {name}"


class Bag:
    def __init__(self) -> None:
        self.items: dict[str, int] = {"a": 1}

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def __contains__(self, key: object) -> bool:
        return key in self.items

    def __getitem__(self, key: str) -> int:
        return self.items[key]

    def __setitem__(self, key: str, value: int) -> None:
        self.items[key] = value

    def __delitem__(self, key: str) -> None:
        del self.items[key]

    def __repr__(self) -> str:
        return f"Bag({self.items!r})"

    @decorate(Counting)
    def total(self) -> int:
        return sum(self.items.values())


def _factory(*instances: object) -> ProxyFactory:
    by_type = {type(i): i for i in instances}
    return ProxyFactory(lambda interceptor_type: by_type[interceptor_type])


@pytest.fixture(autouse=True)
def _clear_cache():
    MethodDecorationMap.clear()
    yield
    MethodDecorationMap.clear()


# ---------------------------------------------------------------------------
# Sync/async uniformity
# ---------------------------------------------------------------------------


class TestSyncMembers:
    def test_void_member(self):
        counting = Counting()
        worker = Worker()
        proxy = _factory(counting).create_proxy(worker)

        assert proxy.void() is None
        assert (counting.before, counting.after, worker.runs) == (1, 1, 1)

    def test_value_member(self):
        counting = Counting()
        worker = Worker()
        proxy = _factory(counting).create_proxy(worker)

        assert proxy.value() == 42
        assert proxy.value(base=0) == 2
        assert (counting.before, counting.after, worker.runs) == (2, 2, 2)

    def test_sync_wrapper_is_not_a_coroutine_function(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        assert not inspect.iscoroutinefunction(proxy.value)

    def test_returned_awaitable_is_not_awaited(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        result = proxy.returns_awaitable()
        try:
            assert inspect.isawaitable(result)
        finally:
            result.close()

    def test_sync_member_with_sleeping_interceptor_returns_value(self):
        slow = Slow()
        proxy = _factory(Backoff()).create_proxy(slow)

        assert proxy.sync_member() == "sync"
        assert slow.attempts == 3

    def test_sync_member_with_wait_for_interceptor_returns_value(self):
        proxy = _factory(Timeout()).create_proxy(Slow())
        assert proxy.timed(41) == 42

    @pytest.mark.asyncio
    async def test_sync_member_called_from_running_loop(self):
        slow = Slow()
        proxy = _factory(Backoff(), Timeout()).create_proxy(slow)

        assert proxy.sync_member() == "sync"
        assert proxy.timed(1) == 2
        assert slow.attempts == 3


class TestAsyncMembers:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "member",
        ["async_void_no_await", "async_void_one_await", "async_value_several_awaits"],
    )
    async def test_one_increment_per_call(self, member):
        counting = Counting()
        worker = Worker()
        proxy = _factory(counting).create_proxy(worker)

        await getattr(proxy, member)()
        await getattr(proxy, member)()

        assert (counting.before, counting.after, worker.runs) == (2, 2, 2)

    @pytest.mark.asyncio
    async def test_async_value(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        assert await proxy.async_value_several_awaits() == 42

    @pytest.mark.asyncio
    async def test_async_member_with_suspending_interceptor(self):
        proxy = _factory(Sleeping()).create_proxy(Slow())
        assert await proxy.async_member() == "async"

    def test_async_wrapper_is_coroutine_function(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        assert inspect.iscoroutinefunction(proxy.async_value_several_awaits)

    def test_interceptors_run_only_when_awaited(self):
        counting = Counting()
        proxy = _factory(counting).create_proxy(Worker())

        pending = proxy.async_void_no_await()
        assert counting.before == 0
        pending.close()


# ---------------------------------------------------------------------------
# Pass-through and attribute forwarding
# ---------------------------------------------------------------------------


class TestPassThrough:
    def test_undecorated_member_is_targets_bound_method(self):
        counting = Counting()
        worker = Worker()
        proxy = _factory(counting).create_proxy(worker)

        assert proxy.plain == worker.plain
        assert proxy.plain() == "plain"
        assert counting.before == 0

    def test_static_and_property_members(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        assert proxy.helper() == "static"
        assert proxy.name == "worker"

    def test_getattr_dispatch(self):
        counting = Counting()
        proxy = _factory(counting).create_proxy(Worker())
        assert getattr(proxy, "value")() == 42
        assert counting.before == 1

    def test_wrapper_is_cached_and_keeps_metadata(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        assert proxy.value is proxy.value
        assert proxy.value.__name__ == "value"

    def test_attribute_writes_reach_target(self):
        worker = Worker()
        proxy = _factory(Counting()).create_proxy(worker)

        proxy.runs = 10
        proxy.extra = "x"
        assert worker.runs == 10
        assert worker.extra == "x"

        del proxy.extra
        assert not hasattr(worker, "extra")

    def test_missing_attribute_raises(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        with pytest.raises(AttributeError):
            proxy.missing


class TestIdentityAndDunders:
    def test_isinstance_of_implementation_and_contract(self):
        proxy = _factory(Counting(), Tracing()).create_proxy(FriendlyGreeter(), Greeter)
        assert isinstance(proxy, FriendlyGreeter)
        assert isinstance(proxy, Greeter)
        assert type(proxy) is InterceptionProxy

    def test_repr_str_eq_hash(self):
        bag = Bag()
        proxy = _factory(Counting()).create_proxy(bag)
        assert repr(proxy) == "Bag({'a': 1})"
        assert str(proxy) == "Bag({'a': 1})"
        assert proxy == bag
        assert proxy == _factory(Counting()).create_proxy(bag)
        assert hash(proxy) == hash(bag)

    def test_container_protocol_forwarded(self):
        bag = Bag()
        proxy = _factory(Counting()).create_proxy(bag)

        proxy["b"] = 2
        assert len(proxy) == 2
        assert list(proxy) == ["a", "b"]
        assert "b" in proxy
        assert proxy["b"] == 2
        del proxy["a"]
        assert bag.items == {"b": 2}
        assert proxy.total() == 2

    def test_truthiness_follows_target(self):
        bag = Bag()
        bag.items.clear()
        proxy = _factory(Counting()).create_proxy(bag)
        assert not proxy

    def test_dir_lists_target_members(self):
        proxy = _factory(Counting()).create_proxy(Worker())
        assert "value" in dir(proxy)


# ---------------------------------------------------------------------------
# Call context as seen by interceptors
# ---------------------------------------------------------------------------


class TestCallContext:
    def test_call_describes_invocation(self):
        counting = Counting()
        worker = Worker()
        proxy = _factory(counting).create_proxy(worker)

        proxy.value(base=1)

        (call,) = counting.calls
        assert call.target is worker
        assert call.method_name == "value"
        assert call.args == []
        assert call.kwargs == {"base": 1}
        assert call.return_value == 3
        assert call.method is call.method_implementation is Worker.__dict__["value"]

    def test_contract_method_and_implementation_differ(self):
        counting = Counting()
        proxy = _factory(counting, Tracing()).create_proxy(FriendlyGreeter(), Greeter)

        assert proxy.greet("Ada") == "Hello Ada"

        (call,) = counting.calls
        assert call.method is Greeter.__dict__["greet"]
        assert call.method_implementation is FriendlyGreeter.__dict__["greet"]
        assert [d.interceptor_type for d in call.decorations] == [Counting, Tracing]

    def test_each_invocation_gets_fresh_call(self):
        counting = Counting()
        proxy = _factory(counting).create_proxy(Worker())
        proxy.void()
        proxy.void()
        assert counting.calls[0] is not counting.calls[1]

    def test_exception_identity_and_record(self):
        counting = Counting()
        proxy = _factory(counting).create_proxy(Worker())

        with pytest.raises(LookupError, match="nothing here") as exc_info:
            proxy.fail()

        assert counting.calls[0].exception is exc_info.value
        assert counting.after == 0


# ---------------------------------------------------------------------------
# Interceptor resolution
# ---------------------------------------------------------------------------


class TestInterceptorResolution:
    def test_interceptors_resolved_on_every_call(self):
        resolved: list[type] = []

        def factory(interceptor_type: type) -> object:
            resolved.append(interceptor_type)
            return interceptor_type()

        proxy = ProxyFactory(factory).create_proxy(Worker())
        assert resolved == []

        proxy.void()
        proxy.void()
        assert resolved == [Counting, Counting]

    def test_default_factory_instantiates_interceptor(self):
        worker = Worker()
        proxy = ProxyFactory().create_proxy(worker)
        assert proxy.value() == 42
        assert worker.runs == 1

    def test_resolution_error_surfaces_at_call(self):
        def factory(interceptor_type: type) -> object:
            raise NoSuchServiceError(service_type=interceptor_type)

        proxy = ProxyFactory(factory).create_proxy(Worker())
        with pytest.raises(NoSuchServiceError):
            proxy.void()

    def test_object_without_on_invoke_rejected(self):
        proxy = ProxyFactory(lambda interceptor_type: object()).create_proxy(Worker())
        with pytest.raises(InvalidInterceptorError, match="Counting"):
            proxy.void()


# ---------------------------------------------------------------------------
# create_proxy edge cases
# ---------------------------------------------------------------------------


class TestCreateProxy:
    def test_none_target_rejected(self):
        with pytest.raises(TypeError):
            ProxyFactory().create_proxy(None)

    def test_proxy_of_proxy_wraps_original_target(self):
        worker = Worker()
        counting = Counting()
        factory = _factory(counting)
        twice = factory.create_proxy(factory.create_proxy(worker))

        assert unwrap(twice) is worker
        twice.void()
        assert counting.before == 1

    def test_undecorated_target_still_proxied(self):
        class Plain:
            def run(self) -> str:
                return "ran"

        plain = Plain()
        proxy = ProxyFactory().create_proxy(plain)
        assert proxy.run() == "ran"
        assert unwrap(proxy) is plain
