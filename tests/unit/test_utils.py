"""Tests for AWS helper functions."""

import pytest

from ec2login.models import InstanceDescriptor, SearchCriteria
from ec2login.providers.aws.utils import (
    build_instance_filters,
    extract_instance_from_response,
    get_instance_name,
    to_instance_descriptor,
)


class TestGetInstanceName:
    """Tests for display name resolution."""

    def test_returns_name_tag_value(self) -> None:
        tags = [{"Key": "Env", "Value": "prod"}, {"Key": "Name", "Value": "web-1"}]
        assert get_instance_name(tags) == "web-1"

    @pytest.mark.parametrize(
        "tags",
        [None, [], [{"Key": "Env", "Value": "prod"}], [{"Key": "name", "Value": "x"}]],
    )
    def test_returns_sentinel_without_name_tag(self, tags) -> None:
        assert get_instance_name(tags) == "No Name"

    def test_first_name_tag_wins(self) -> None:
        tags = [{"Key": "Name", "Value": "first"}, {"Key": "Name", "Value": "second"}]
        assert get_instance_name(tags) == "first"

    def test_empty_name_value_is_kept(self) -> None:
        assert get_instance_name([{"Key": "Name", "Value": ""}]) == ""


class TestBuildInstanceFilters:
    """Tests for describe_instances filter construction."""

    def test_id_search(self) -> None:
        criteria = SearchCriteria(search_by_id=True, term="i-0123", include_stopped=False)

        assert build_instance_filters(criteria) == [
            {"Name": "instance-id", "Values": ["i-0123"]},
            {"Name": "instance-state-name", "Values": ["running"]},
        ]

    def test_name_search_wraps_term_in_wildcards(self) -> None:
        criteria = SearchCriteria(search_by_id=False, term="web", include_stopped=True)

        assert build_instance_filters(criteria) == [
            {"Name": "tag:Name", "Values": ["*web*"]}
        ]

    def test_empty_term_with_stopped_has_no_filters(self) -> None:
        criteria = SearchCriteria(search_by_id=True, term="", include_stopped=True)

        assert build_instance_filters(criteria) == []

    def test_empty_term_running_only(self) -> None:
        criteria = SearchCriteria(search_by_id=False, term="", include_stopped=False)

        assert build_instance_filters(criteria) == [
            {"Name": "instance-state-name", "Values": ["running"]}
        ]


def test_to_instance_descriptor_maps_fields() -> None:
    instance = {
        "InstanceId": "i-0123",
        "State": {"Name": "stopped"},
        "PrivateIpAddress": "10.0.0.5",
        "KeyName": "mykey",
        "Tags": [{"Key": "Name", "Value": "web"}, {"Key": "Env", "Value": "dev"}],
    }

    descriptor = to_instance_descriptor(instance)

    assert descriptor == InstanceDescriptor(
        instance_id="i-0123",
        name="web",
        state="stopped",
        private_ip="10.0.0.5",
        public_ip=None,
        key_name="mykey",
    )
    assert descriptor.tags == {"Name": "web", "Env": "dev"}
    assert descriptor.address("private") == "10.0.0.5"
    assert descriptor.address("public") is None


def test_extract_instance_from_empty_response_raises() -> None:
    with pytest.raises(ValueError, match="No reservations"):
        extract_instance_from_response({"Reservations": []})

    with pytest.raises(ValueError, match="No instances"):
        extract_instance_from_response({"Reservations": [{"Instances": []}]})
