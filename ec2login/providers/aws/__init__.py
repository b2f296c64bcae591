"""AWS provider: EC2 instances and Secrets Manager keys."""

from __future__ import annotations

from ec2login.providers.aws.compute import EC2Manager
from ec2login.providers.aws.secrets import SecretStore

__all__ = ["EC2Manager", "SecretStore"]
