"""Unit tests for SettingsMutationGateway."""

from typing import Any

import pytest

from providerhub.application.services.connectivity_tester import ConnectivityTestExecutor
from providerhub.application.services.settings_gateway import SettingsMutationGateway
from providerhub.core.configuration.exceptions import (
    ConflictError,
    NotFoundError,
    NotVerifiedError,
    TestFailedError,
)
from providerhub.domain.entities.provider_configuration import ConfigurationState
from providerhub.domain.entities.provider_descriptor import ProviderDescriptor
from providerhub.domain.services.secret_redactor import MASK_SENTINEL
from providerhub.infrastructure.configuration.providers.backup.s3 import S3_DESCRIPTOR
from providerhub.infrastructure.configuration.providers.base import ConnectivityProbe, ProbeRegistry

SECRET = "wJalrXUtnFEMI/K7MDENG/bPxRfiCYEXAMPLEKEY"


class ScriptedProbe(ConnectivityProbe):
    """Probe whose outcome can be switched between calls."""

    def __init__(self, descriptor: ProviderDescriptor) -> None:
        self._descriptor = descriptor
        self.success = True
        self.detail = "ok"
        self.calls: list[dict[str, Any]] = []
        self.before_return = None

    @property
    def descriptor(self) -> ProviderDescriptor:
        return self._descriptor

    async def check(self, values: dict[str, Any]) -> tuple[bool, str]:
        self.calls.append(dict(values))
        if self.before_return is not None:
            await self.before_return()
        return self.success, self.detail


@pytest.fixture
def probe() -> ScriptedProbe:
    return ScriptedProbe(S3_DESCRIPTOR)


@pytest.fixture
def gateway(store, registry, probe) -> SettingsMutationGateway:
    probes = ProbeRegistry()
    probes.register(probe)
    executor = ConnectivityTestExecutor(registry=registry, probes=probes, timeout_seconds=1)
    return SettingsMutationGateway(store, executor)


async def _configured(gateway, s3_values, owner_scope=None):
    return await gateway.apply_configuration("backup_storage", "s3", owner_scope, s3_values)


class TestApplyConfiguration:
    @pytest.mark.asyncio
    async def test_save_without_test(self, gateway, probe, s3_values):
        config = await _configured(gateway, s3_values)

        assert config.state == ConfigurationState.CONFIGURED
        assert probe.calls == []

    @pytest.mark.asyncio
    async def test_test_first_success_persists(self, gateway, probe, s3_values):
        config = await gateway.apply_configuration(
            "backup_storage", "s3", None, s3_values, test_first=True
        )

        assert config.state == ConfigurationState.CONFIGURED
        assert len(probe.calls) == 1

    @pytest.mark.asyncio
    async def test_test_first_failure_persists_nothing(self, gateway, probe, s3_values):
        probe.success, probe.detail = False, "AccessDenied"

        with pytest.raises(TestFailedError) as exc_info:
            await gateway.apply_configuration("backup_storage", "s3", None, s3_values, test_first=True)

        assert exc_info.value.detail == "AccessDenied"
        assert (await gateway.store.get("backup_storage", "s3")).state == ConfigurationState.UNCONFIGURED

    @pytest.mark.asyncio
    async def test_test_first_failure_keeps_previous_values(self, gateway, probe, s3_values):
        await _configured(gateway, s3_values)
        probe.success = False

        with pytest.raises(TestFailedError):
            await gateway.apply_configuration(
                "backup_storage",
                "s3",
                None,
                {**s3_values, "AWS_S3_BUCKET_NAME": "typo-bucket"},
                test_first=True,
            )

        stored = await gateway.store.get("backup_storage", "s3")
        assert stored.field_values["AWS_S3_BUCKET_NAME"] == "acme-backups"

    @pytest.mark.asyncio
    async def test_test_first_uses_stored_secret_for_masked_value(self, gateway, probe, s3_values):
        await _configured(gateway, s3_values)

        await gateway.apply_configuration(
            "backup_storage",
            "s3",
            None,
            {**s3_values, "AWS_SECRET_ACCESS_KEY": MASK_SENTINEL},
            test_first=True,
        )

        assert probe.calls[-1]["AWS_SECRET_ACCESS_KEY"] == SECRET


class TestConnectionTest:
    @pytest.mark.asyncio
    async def test_never_persists(self, gateway, probe, s3_values):
        before = await gateway.store.get("backup_storage", "s3")

        for outcome in (True, False):
            probe.success = outcome
            await gateway.test("backup_storage", "s3", s3_values)

        after = await gateway.store.get("backup_storage", "s3")
        assert before.state == after.state == ConfigurationState.UNCONFIGURED

    @pytest.mark.asyncio
    async def test_does_not_change_stored_configuration(self, gateway, probe, s3_values):
        stored = await _configured(gateway, s3_values)
        probe.success = False

        await gateway.test("backup_storage", "s3", {**s3_values, "AWS_REGION": "ap-south-1"})

        after = await gateway.store.get("backup_storage", "s3")
        assert after.updated_at == stored.updated_at
        assert after.field_values == stored.field_values
        assert after.state == ConfigurationState.CONFIGURED

    @pytest.mark.asyncio
    async def test_masked_secret_resolved_from_store(self, gateway, probe, s3_values):
        await _configured(gateway, s3_values)
        masked = await gateway.get_masked("backup_storage", "s3")

        result = await gateway.test("backup_storage", "s3", masked.field_values)

        assert result.success is True
        assert probe.calls[-1]["AWS_SECRET_ACCESS_KEY"] == SECRET


class TestVerifyAndActivate:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self, gateway, s3_values):
        await _configured(gateway, s3_values)

        verified = await gateway.verify("backup_storage", "s3")
        assert verified.state == ConfigurationState.VERIFIED

        active = await gateway.activate("backup_storage", "s3")
        assert active.state == ConfigurationState.ACTIVE

    @pytest.mark.asyncio
    async def test_verify_failure_leaves_state(self, gateway, probe, s3_values):
        await _configured(gateway, s3_values)
        probe.success, probe.detail = False, "NoSuchBucket"

        with pytest.raises(TestFailedError):
            await gateway.verify("backup_storage", "s3")

        assert (await gateway.store.get("backup_storage", "s3")).state == ConfigurationState.CONFIGURED

    @pytest.mark.asyncio
    async def test_verify_unconfigured(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.verify("backup_storage", "s3")

    @pytest.mark.asyncio
    async def test_verify_conflicts_with_concurrent_edit(self, gateway, probe, s3_values):
        await _configured(gateway, s3_values)

        async def edit_during_test():
            probe.before_return = None
            await gateway.apply_configuration(
                "backup_storage", "s3", None, {**s3_values, "AWS_REGION": "us-east-1"}
            )

        probe.before_return = edit_during_test

        with pytest.raises(ConflictError):
            await gateway.verify("backup_storage", "s3")

        assert (await gateway.store.get("backup_storage", "s3")).state == ConfigurationState.CONFIGURED

    @pytest.mark.asyncio
    async def test_activate_unconfigured(self, gateway):
        with pytest.raises(NotVerifiedError) as exc_info:
            await gateway.activate("backup_storage", "s3")

        assert exc_info.value.current_state == "unconfigured"

    @pytest.mark.asyncio
    async def test_activate_configured(self, gateway, s3_values):
        await _configured(gateway, s3_values)

        with pytest.raises(NotVerifiedError):
            await gateway.activate("backup_storage", "s3")

    @pytest.mark.asyncio
    async def test_activate_error(self, gateway, s3_values):
        await _configured(gateway, s3_values)
        await gateway.verify("backup_storage", "s3")
        await gateway.record_runtime_failure("backup_storage", "s3", None, "upload failed")

        with pytest.raises(NotVerifiedError) as exc_info:
            await gateway.activate("backup_storage", "s3")

        assert exc_info.value.current_state == "error"

    @pytest.mark.asyncio
    async def test_activate_active_is_rejected(self, gateway, s3_values):
        await _configured(gateway, s3_values)
        await gateway.verify("backup_storage", "s3")
        await gateway.activate("backup_storage", "s3")

        with pytest.raises(NotVerifiedError):
            await gateway.activate("backup_storage", "s3")


class TestRuntimeFailure:
    @pytest.mark.asyncio
    async def test_message_is_sanitized(self, gateway, s3_values):
        await _configured(gateway, s3_values)

        config = await gateway.record_runtime_failure(
            "backup_storage", "s3", None, f"SignatureDoesNotMatch for {SECRET}"
        )

        assert config.state == ConfigurationState.ERROR
        assert SECRET not in config.last_error
        assert config.last_error.startswith("SignatureDoesNotMatch")

    @pytest.mark.asyncio
    async def test_unconfigured(self, gateway):
        with pytest.raises(NotFoundError):
            await gateway.record_runtime_failure("backup_storage", "s3", None, "boom")


class TestResolveEffective:
    @pytest.mark.asyncio
    async def test_owner_configuration_wins(self, gateway, s3_values):
        await _configured(gateway, s3_values)
        await gateway.verify("backup_storage", "s3")
        await gateway.activate("backup_storage", "s3")
        await _configured(gateway, {**s3_values, "AWS_S3_BUCKET_NAME": "tenant-bucket"}, "tenant-1")
        await gateway.verify("backup_storage", "s3", "tenant-1")
        await gateway.activate("backup_storage", "s3", "tenant-1")

        config = await gateway.resolve_effective("backup_storage", "s3", "tenant-1")

        assert config.owner_scope == "tenant-1"
        assert config.field_values["AWS_S3_BUCKET_NAME"] == "tenant-bucket"

    @pytest.mark.asyncio
    async def test_falls_back_to_global(self, gateway, s3_values):
        await _configured(gateway, s3_values)
        await gateway.verify("backup_storage", "s3")
        await gateway.activate("backup_storage", "s3")
        await _configured(gateway, s3_values, "tenant-1")

        config = await gateway.resolve_effective("backup_storage", "s3", "tenant-1")

        assert config.owner_scope is None
        assert config.field_values["AWS_SECRET_ACCESS_KEY"] == SECRET

    @pytest.mark.asyncio
    async def test_nothing_active(self, gateway, s3_values):
        await _configured(gateway, s3_values)

        assert await gateway.resolve_effective("backup_storage", "s3", "tenant-1") is None


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete(self, gateway, s3_values):
        await _configured(gateway, s3_values)

        await gateway.delete("backup_storage", "s3")

        assert (await gateway.get_masked("backup_storage", "s3")).state == ConfigurationState.UNCONFIGURED
