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
"""Tests for ServiceProvider resolution, lifetimes and constructor injection."""

from typing import Optional

import pytest

from pyweave.container import (
    CircularDependencyError,
    ContainerException,
    Lifetime,
    NoSuchServiceError,
    ServiceCollection,
    ServiceDescriptor,
    ServiceProvider,
)


class Greeter:
    def greet(self) -> str:
        return "hello"


class UserService:
    def __init__(self, greeter: Greeter) -> None:
        self.greeter = greeter


# -- Helper classes for Optional injection tests (module-level for get_type_hints) --


class OptionalGreeterService:
    def __init__(self, greeter: Optional[Greeter] = None) -> None:
        self.greeter = greeter


class PEP604OptionalService:
    def __init__(self, greeter: Greeter | None = None) -> None:
        self.greeter = greeter


# -- Helper classes for list injection tests --


class Validator:
    pass


class EmailValidator(Validator):
    pass


class PhoneValidator(Validator):
    pass


class ValidationService:
    def __init__(self, validators: list[Validator]) -> None:
        self.validators = validators


class DefaultService:
    def __init__(self, name: str = "default") -> None:
        self.name = name


class TypeParamService:
    def __init__(self, model: type) -> None:
        self.model = model


class ProviderAware:
    def __init__(self, provider: ServiceProvider) -> None:
        self.provider = provider


class MissingDep:
    pass


class ServiceWithMissing:
    def __init__(self, dep: MissingDep) -> None:
        self.dep = dep


# -- Helper classes for circular dependency tests --


class CircularB:
    def __init__(self, a: "CircularA") -> None:
        self.a = a


class CircularA:
    def __init__(self, b: CircularB) -> None:
        self.b = b


class ChainC:
    pass


class ChainB:
    def __init__(self, c: ChainC) -> None:
        self.c = c


class ChainA:
    def __init__(self, b: ChainB) -> None:
        self.b = b


def _provider(*registrations: tuple[type, type | None, Lifetime]) -> ServiceProvider:
    services = ServiceCollection()
    for service_type, implementation, lifetime in registrations:
        services.add(ServiceDescriptor.describe(service_type, implementation, lifetime))
    return services.build_provider()


class TestResolution:
    def test_register_and_resolve(self):
        provider = _provider((Greeter, None, Lifetime.SINGLETON))
        instance = provider.resolve(Greeter)
        assert isinstance(instance, Greeter)
        assert instance.greet() == "hello"

    def test_resolve_with_dependency(self):
        provider = _provider((Greeter, None, Lifetime.SINGLETON), (UserService, None, Lifetime.TRANSIENT))
        service = provider.resolve(UserService)
        assert isinstance(service.greeter, Greeter)

    def test_last_registration_wins(self):
        provider = _provider(
            (Validator, EmailValidator, Lifetime.SINGLETON),
            (Validator, PhoneValidator, Lifetime.SINGLETON),
        )
        assert isinstance(provider.resolve(Validator), PhoneValidator)

    def test_resolve_all_in_registration_order(self):
        provider = _provider(
            (Validator, EmailValidator, Lifetime.SINGLETON),
            (Validator, PhoneValidator, Lifetime.TRANSIENT),
        )
        assert [type(v) for v in provider.resolve_all(Validator)] == [EmailValidator, PhoneValidator]

    def test_resolve_all_unregistered_is_empty(self):
        assert _provider().resolve_all(Validator) == []

    def test_resolve_optional(self):
        provider = _provider((Greeter, None, Lifetime.SINGLETON))
        assert isinstance(provider.resolve_optional(Greeter), Greeter)
        assert provider.resolve_optional(UserService) is None

    def test_resolve_instance_registration(self):
        greeter = Greeter()
        services = ServiceCollection()
        services.add_singleton(Greeter, instance=greeter)
        assert services.build_provider().resolve(Greeter) is greeter

    def test_factory_receives_provider(self):
        services = ServiceCollection()
        services.add_singleton(Greeter)
        services.add_transient(UserService, factory=lambda sp: UserService(sp.resolve(Greeter)))
        provider = services.build_provider()
        assert provider.resolve(UserService).greeter is provider.resolve(Greeter)

    def test_resolving_provider_returns_itself(self):
        provider = _provider((ProviderAware, None, Lifetime.TRANSIENT))
        assert provider.resolve(ServiceProvider) is provider
        assert provider.resolve(ProviderAware).provider is provider


class TestLifetimes:
    def test_singleton_returns_same_instance(self):
        provider = _provider((Greeter, None, Lifetime.SINGLETON))
        assert provider.resolve(Greeter) is provider.resolve(Greeter)

    def test_transient_returns_new_instance(self):
        provider = _provider((Greeter, None, Lifetime.TRANSIENT))
        assert provider.resolve(Greeter) is not provider.resolve(Greeter)

    def test_scoped_from_root_uses_root_as_scope(self):
        provider = _provider((Greeter, None, Lifetime.SCOPED))
        assert provider.resolve(Greeter) is provider.resolve(Greeter)

    def test_each_registration_has_its_own_singleton(self):
        services = ServiceCollection()
        services.add_singleton(Greeter)
        services.add_singleton(Greeter)
        provider = services.build_provider()
        first, second = provider.resolve_all(Greeter)
        assert first is not second

    def test_instantiate_bypasses_cache(self):
        services = ServiceCollection()
        services.add_singleton(Greeter)
        provider = services.build_provider()
        descriptor = services[0]
        assert provider.instantiate(descriptor) is not provider.instantiate(descriptor)
        assert provider.instantiate(descriptor) is not provider.resolve(Greeter)

    def test_instantiate_instance_registration_returns_instance(self):
        greeter = Greeter()
        descriptor = ServiceDescriptor.from_instance(Greeter, greeter)
        assert _provider().instantiate(descriptor) is greeter


class TestParameterInjection:
    def test_respects_param_defaults(self):
        provider = _provider((DefaultService, None, Lifetime.TRANSIENT))
        assert provider.resolve(DefaultService).name == "default"

    def test_type_param_raises(self):
        provider = _provider((TypeParamService, None, Lifetime.TRANSIENT))
        with pytest.raises(NoSuchServiceError, match="model: type"):
            provider.resolve(TypeParamService)

    def test_optional_resolves_to_none_when_missing(self):
        provider = _provider((OptionalGreeterService, None, Lifetime.TRANSIENT))
        assert provider.resolve(OptionalGreeterService).greeter is None

    def test_optional_resolves_to_instance_when_registered(self):
        provider = _provider(
            (Greeter, None, Lifetime.SINGLETON),
            (OptionalGreeterService, None, Lifetime.TRANSIENT),
        )
        assert isinstance(provider.resolve(OptionalGreeterService).greeter, Greeter)

    def test_pep604_optional(self):
        provider = _provider((PEP604OptionalService, None, Lifetime.TRANSIENT))
        assert provider.resolve(PEP604OptionalService).greeter is None

    def test_list_collects_all_registrations(self):
        provider = _provider(
            (Validator, EmailValidator, Lifetime.SINGLETON),
            (Validator, PhoneValidator, Lifetime.SINGLETON),
            (ValidationService, None, Lifetime.TRANSIENT),
        )
        svc = provider.resolve(ValidationService)
        assert {type(v) for v in svc.validators} == {EmailValidator, PhoneValidator}

    def test_list_returns_empty_when_none_registered(self):
        provider = _provider((ValidationService, None, Lifetime.TRANSIENT))
        assert provider.resolve(ValidationService).validators == []


class TestResolutionErrors:
    def test_unregistered_raises_no_such_service(self):
        with pytest.raises(NoSuchServiceError) as exc_info:
            _provider().resolve(Greeter)
        assert exc_info.value.service_type is Greeter
        assert exc_info.value.code == "CONTAINER_NO_SUCH_SERVICE"
        assert isinstance(exc_info.value, ContainerException)

    def test_missing_dependency_names_consumer_and_parameter(self):
        provider = _provider((ServiceWithMissing, None, Lifetime.TRANSIENT))
        with pytest.raises(NoSuchServiceError) as exc_info:
            provider.resolve(ServiceWithMissing)
        message = str(exc_info.value)
        assert "ServiceWithMissing.__init__()" in message
        assert "dep: MissingDep" in message

    def test_suggests_similar_names(self):
        provider = _provider((Greeter, None, Lifetime.SINGLETON))

        class Greeterr:
            pass

        with pytest.raises(NoSuchServiceError) as exc_info:
            provider.resolve(Greeterr)
        assert "Greeter" in exc_info.value.suggestions


class TestCircularDependencyDetection:
    def test_circular_dependency_raises(self):
        provider = _provider((CircularA, None, Lifetime.SINGLETON), (CircularB, None, Lifetime.SINGLETON))
        with pytest.raises(CircularDependencyError, match="CircularA -> CircularB -> CircularA"):
            provider.resolve(CircularA)

    def test_chain_is_cleared_after_failure(self):
        provider = _provider(
            (CircularA, None, Lifetime.TRANSIENT),
            (CircularB, None, Lifetime.TRANSIENT),
            (ChainC, None, Lifetime.TRANSIENT),
        )
        with pytest.raises(CircularDependencyError):
            provider.resolve(CircularA)
        assert isinstance(provider.resolve(ChainC), ChainC)

    def test_non_circular_deep_chain_works(self):
        provider = _provider(
            (ChainC, None, Lifetime.SINGLETON),
            (ChainB, None, Lifetime.SINGLETON),
            (ChainA, None, Lifetime.SINGLETON),
        )
        assert isinstance(provider.resolve(ChainA).b.c, ChainC)
