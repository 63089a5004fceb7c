"""Networking adapter — VCNs and subnets via ``oci.core.VirtualNetworkClient``."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from ocimcp.adapters.base import ResourceAdapter, optional
from ocimcp.config import CompartmentScope
from ocimcp.records import VCN, Subnet


class NetworkAdapter(ResourceAdapter):
    family = "networking"

    def __init__(self, network_client: Any, scope: CompartmentScope):
        super().__init__(scope)
        self._network = network_client

    def list_vcns(self, compartment_id: str) -> list[VCN]:
        response = self._network.list_vcns(compartment_id=compartment_id)
        return [VCN.from_sdk(v) for v in response.data]

    def list_subnets(self, compartment_id: str, vcn_id: Optional[str] = None) -> list[Subnet]:
        kwargs = {"compartment_id": compartment_id}
        if vcn_id:
            kwargs["vcn_id"] = vcn_id
        response = self._network.list_subnets(**kwargs)
        return [Subnet.from_sdk(s) for s in response.data]

    def handle(self, tool_name: str, arguments: Mapping[str, Any]) -> Any:
        if tool_name == "list_vcns":
            return self.list_vcns(self.compartment(arguments))
        elif tool_name == "list_subnets":
            return self.list_subnets(self.compartment(arguments), optional(arguments, "vcnId"))
        else:
            raise self._unknown(tool_name)
