"""Value objects passed between the login flow components."""

from __future__ import annotations

from dataclasses import dataclass, field

from ec2login.constants import AddressKind


@dataclass(frozen=True)
class InstanceDescriptor:
    """Read-only snapshot of one EC2 instance.

    Attributes
    ----------
    instance_id : str
        EC2 instance ID
    name : str
        Display name taken from the Name tag
    state : str
        Instance state name (running, stopped, pending, ...)
    private_ip : str | None
        Private IPv4 address, if assigned
    public_ip : str | None
        Public IPv4 address, only present while running
    key_name : str | None
        Name of the key pair the instance was launched with
    tags : dict[str, str]
        Instance tags
    """

    instance_id: str
    name: str
    state: str
    private_ip: str | None = None
    public_ip: str | None = None
    key_name: str | None = None
    tags: dict[str, str] = field(default_factory=dict, compare=False)

    def address(self, kind: str = AddressKind.PRIVATE.value) -> str | None:
        """Return the address the session should connect to.

        Parameters
        ----------
        kind : str
            ``private`` or ``public``

        Returns
        -------
        str | None
            The requested address, or None if the instance has none
        """
        if kind == AddressKind.PUBLIC.value:
            return self.public_ip
        return self.private_ip


@dataclass(frozen=True)
class SearchCriteria:
    """Operator answers that drive the instance query."""

    search_by_id: bool
    term: str
    include_stopped: bool
