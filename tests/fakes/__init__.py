"""Test fake implementations for dependency injection testing."""

from .fake_ec2_manager import FakeEC2Manager, FakeSecretStore, FakeSessionLauncher

__all__ = ["FakeEC2Manager", "FakeSecretStore", "FakeSessionLauncher"]
