"""Identity adapter — compartments and availability domains via ``oci.identity.IdentityClient``."""

from __future__ import annotations

from typing import Any, Mapping

from ocimcp.adapters.base import ResourceAdapter
from ocimcp.config import CompartmentScope
from ocimcp.records import AvailabilityDomain, Compartment


class IdentityAdapter(ResourceAdapter):
    family = "identity"

    def __init__(self, identity_client: Any, scope: CompartmentScope):
        super().__init__(scope)
        self._identity = identity_client

    def list_compartments(self) -> list[Compartment]:
        # Always rooted at the tenancy, whatever the default compartment is.
        response = self._identity.list_compartments(compartment_id=self.scope.tenancy_id)
        return [Compartment.from_sdk(c) for c in response.data]

    def list_availability_domains(self, compartment_id: str) -> list[AvailabilityDomain]:
        response = self._identity.list_availability_domains(compartment_id=compartment_id)
        return [AvailabilityDomain.from_sdk(ad) for ad in response.data]

    def handle(self, tool_name: str, arguments: Mapping[str, Any]) -> Any:
        if tool_name == "list_compartments":
            return self.list_compartments()
        elif tool_name == "list_availability_domains":
            return self.list_availability_domains(self.compartment(arguments))
        else:
            raise self._unknown(tool_name)
