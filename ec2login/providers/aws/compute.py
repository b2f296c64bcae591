"""EC2 instance lookup and lifecycle management for ec2-login."""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import Any

import boto3
from botocore.exceptions import WaiterError

from ec2login.constants import (
    START_TIMEOUT_SECONDS,
    WAITER_DELAY_SECONDS,
    InstanceState,
)
from ec2login.exceptions import (
    InstanceStateError,
    QueryError,
    StartError,
    StartTimeoutError,
)
from ec2login.models import InstanceDescriptor, SearchCriteria
from ec2login.providers.aws.errors import handle_aws_errors
from ec2login.providers.aws.utils import (
    build_instance_filters,
    extract_instance_from_response,
    to_instance_descriptor,
)

logger = logging.getLogger(__name__)


class EC2Manager:
    """Query and start EC2 instances.

    Parameters
    ----------
    region : str | None
        AWS region, or None to use the boto3 default chain
    boto3_client_factory : Callable[..., Any] | None
        Optional factory for creating boto3 clients. If None, uses boto3.client
    waiter_delay : int
        Seconds between readiness polls
    """

    def __init__(
        self,
        region: str | None = None,
        boto3_client_factory: Callable[..., Any] | None = None,
        waiter_delay: int = WAITER_DELAY_SECONDS,
    ) -> None:
        self.region = region
        self.boto3_client_factory = boto3_client_factory or boto3.client
        self.waiter_delay = waiter_delay

        with handle_aws_errors("Creating EC2 client", QueryError):
            self.ec2_client = self.boto3_client_factory("ec2", region_name=region)

    def list_instances(self, criteria: SearchCriteria) -> list[InstanceDescriptor]:
        """List instances matching the operator's search.

        All result pages are fetched before anything is returned. Order is
        page order, then reservation order, then instance order.

        Parameters
        ----------
        criteria : SearchCriteria
            Search mode, term and state inclusion

        Returns
        -------
        list[InstanceDescriptor]
            Matching instances

        Raises
        ------
        QueryError
            If any page fetch fails
        ProviderCredentialsError
            If AWS credentials are not configured
        """
        filters = build_instance_filters(criteria)
        logger.debug("Querying instances with filters %s", filters)

        instances: list[InstanceDescriptor] = []

        with handle_aws_errors("Failed to list instances", QueryError):
            paginator = self.ec2_client.get_paginator("describe_instances")

            for page in paginator.paginate(Filters=filters):
                for reservation in page.get("Reservations", []):
                    for instance in reservation.get("Instances", []):
                        instances.append(to_instance_descriptor(instance))

        logger.debug("Found %d matching instances", len(instances))
        return instances

    def describe_instance(self, instance_id: str) -> InstanceDescriptor:
        """Fetch a fresh snapshot of one instance.

        Raises
        ------
        QueryError
            If the describe call fails or returns no instance
        """
        with handle_aws_errors(f"Failed to describe instance {instance_id}", QueryError):
            response = self.ec2_client.describe_instances(InstanceIds=[instance_id])

        try:
            instance = extract_instance_from_response(response)
        except ValueError as e:
            raise QueryError(f"Instance {instance_id} not found: {e}") from e

        return to_instance_descriptor(instance)

    def ensure_running(
        self,
        instance: InstanceDescriptor,
        timeout: int = START_TIMEOUT_SECONDS,
    ) -> InstanceDescriptor:
        """Make sure the instance is running, starting it if it is stopped.

        A running instance is returned unchanged without any API call. A
        stopped instance gets exactly one start request followed by one
        readiness wait. A pending instance is only waited for.

        Parameters
        ----------
        instance : InstanceDescriptor
            Instance selected by the operator
        timeout : int
            Maximum seconds to wait for the running state

        Returns
        -------
        InstanceDescriptor
            The same descriptor if it was running, otherwise a refreshed
            snapshot taken after the wait

        Raises
        ------
        StartError
            If the start request fails
        StartTimeoutError
            If the instance is not running within ``timeout``
        InstanceStateError
            If the instance is stopping, shutting down or terminated
        """
        state = instance.state
        instance_id = instance.instance_id

        if state == InstanceState.RUNNING.value:
            return instance

        if state == InstanceState.STOPPED.value:
            logger.info("Instance %s is stopped. Starting...", instance_id)
            self.start_instance(instance_id)
        elif state == InstanceState.PENDING.value:
            logger.info("Instance %s is pending, waiting for it to run", instance_id)
        else:
            raise InstanceStateError(
                f"Instance {instance_id} is {state} and cannot be started. "
                "Wait for it to reach the stopped state and try again."
            )

        self.wait_until_running(instance_id, timeout)

        refreshed = self.describe_instance(instance_id)
        logger.info("Instance %s is running", instance_id)
        return refreshed

    def start_instance(self, instance_id: str) -> None:
        """Issue the start request for a stopped instance.

        Raises
        ------
        StartError
            If the API rejects the request
        """
        with handle_aws_errors(f"Failed to start instance {instance_id}", StartError):
            self.ec2_client.start_instances(InstanceIds=[instance_id])

    def wait_until_running(self, instance_id: str, timeout: int) -> None:
        """Block until the instance reports running.

        Raises
        ------
        StartTimeoutError
            If the waiter gives up or sees a failure state
        """
        delay = max(1, self.waiter_delay)
        # the first poll is immediate, so one extra attempt covers the full timeout
        max_attempts = math.ceil(timeout / delay) + 1

        logger.info(
            "Waiting up to %ss for instance %s to reach running state",
            timeout,
            instance_id,
        )

        try:
            waiter = self.ec2_client.get_waiter("instance_running")
            waiter.wait(
                InstanceIds=[instance_id],
                WaiterConfig={"Delay": delay, "MaxAttempts": max_attempts},
            )
        except WaiterError as e:
            raise StartTimeoutError(
                f"Error waiting for instance {instance_id} to start: {e}"
            ) from e
