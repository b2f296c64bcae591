"""AWS-specific utility functions for ec2-login."""

from __future__ import annotations

from typing import Any

from ec2login.constants import NAME_TAG_KEY, NO_NAME, InstanceState
from ec2login.models import InstanceDescriptor, SearchCriteria


def get_instance_name(tags: list[dict[str, str]] | None) -> str:
    """Return the value of the Name tag, or the "No Name" sentinel.

    EC2 enforces unique tag keys per resource. Should a tag list ever carry
    the Name key twice, the first entry in list order wins.

    Parameters
    ----------
    tags : list[dict[str, str]] | None
        Tag list as returned by describe_instances (``Key``/``Value`` dicts)

    Returns
    -------
    str
        Name tag value or ``NO_NAME``
    """
    for tag in tags or []:
        if tag.get("Key") == NAME_TAG_KEY:
            return tag.get("Value", "")
    return NO_NAME


def build_instance_filters(criteria: SearchCriteria) -> list[dict[str, Any]]:
    """Build describe_instances filters for the operator's search.

    Parameters
    ----------
    criteria : SearchCriteria
        Search mode, term and whether to include stopped instances

    Returns
    -------
    list[dict[str, Any]]
        Filters in the EC2 API shape
    """
    filters: list[dict[str, Any]] = []

    if criteria.search_by_id and criteria.term:
        filters.append({"Name": "instance-id", "Values": [criteria.term]})
    elif criteria.term:
        filters.append({"Name": "tag:Name", "Values": [f"*{criteria.term}*"]})

    if not criteria.include_stopped:
        filters.append(
            {"Name": "instance-state-name", "Values": [InstanceState.RUNNING.value]}
        )

    return filters


def to_instance_descriptor(instance: dict[str, Any]) -> InstanceDescriptor:
    """Convert a describe_instances instance dict into a descriptor."""
    tags = instance.get("Tags", [])
    return InstanceDescriptor(
        instance_id=instance["InstanceId"],
        name=get_instance_name(tags),
        state=instance["State"]["Name"],
        private_ip=instance.get("PrivateIpAddress"),
        public_ip=instance.get("PublicIpAddress"),
        key_name=instance.get("KeyName"),
        tags={tag["Key"]: tag.get("Value", "") for tag in reversed(tags)},
    )


def extract_instance_from_response(response: dict[str, Any]) -> dict[str, Any]:
    """Extract first instance from AWS describe_instances response.

    Parameters
    ----------
    response : dict[str, Any]
        Response from boto3 describe_instances call

    Returns
    -------
    dict[str, Any]
        The first instance dictionary

    Raises
    ------
    ValueError
        If response has no reservations or instances
    """
    if not response.get("Reservations"):
        raise ValueError("No reservations in response")
    if not response["Reservations"][0].get("Instances"):
        raise ValueError("No instances in reservation")
    return response["Reservations"][0]["Instances"][0]


def get_aws_credentials_error_message() -> str:
    """Get standard AWS credentials error message.

    Returns
    -------
    str
        Formatted AWS credentials error message
    """
    return (
        "AWS credentials not found\n\n"
        "Configure your credentials:\n"
        "  aws configure\n\n"
        "Or set environment variables:\n"
        "  export AWS_ACCESS_KEY_ID=...\n"
        "  export AWS_SECRET_ACCESS_KEY=...\n"
        "  export AWS_DEFAULT_REGION=..."
    )
