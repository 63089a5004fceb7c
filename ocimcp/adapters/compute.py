"""
Compute adapter — instances, shapes and images via ``oci.core.ComputeClient``.

Each method performs exactly one SDK call and returns the full page the
provider sent back.
"""

from __future__ import annotations

from typing import Any, Mapping

import oci

from ocimcp.adapters.base import ResourceAdapter, required
from ocimcp.config import CompartmentScope
from ocimcp.records import ComputeInstance, Image, Immediate, InstanceShape, LaunchResult


class ComputeAdapter(ResourceAdapter):
    family = "compute"

    def __init__(self, compute_client: Any, scope: CompartmentScope):
        super().__init__(scope)
        self._compute = compute_client

    def list_instances(self, compartment_id: str) -> list[ComputeInstance]:
        response = self._compute.list_instances(compartment_id=compartment_id)
        return [ComputeInstance.from_sdk(i) for i in response.data]

    def get_instance(self, instance_id: str) -> ComputeInstance:
        response = self._compute.get_instance(instance_id=instance_id)
        return ComputeInstance.from_sdk(response.data)

    def launch_instance(
        self,
        compartment_id: str,
        display_name: str,
        availability_domain: str,
        shape: str,
        image_id: str,
        subnet_id: str,
    ) -> LaunchResult:
        details = oci.core.models.LaunchInstanceDetails(
            compartment_id=compartment_id,
            display_name=display_name,
            availability_domain=availability_domain,
            shape=shape,
            source_details=oci.core.models.InstanceSourceViaImageDetails(image_id=image_id),
            create_vnic_details=oci.core.models.CreateVnicDetails(subnet_id=subnet_id),
        )
        response = self._compute.launch_instance(launch_instance_details=details)
        return Immediate(ComputeInstance.from_sdk(response.data))

    def terminate_instance(self, instance_id: str) -> dict:
        self._compute.terminate_instance(instance_id=instance_id)
        return {"message": f"Instance {instance_id} termination initiated"}

    def list_shapes(self, compartment_id: str) -> list[InstanceShape]:
        response = self._compute.list_shapes(compartment_id=compartment_id)
        return [InstanceShape.from_sdk(s) for s in response.data]

    def list_images(self, compartment_id: str) -> list[Image]:
        response = self._compute.list_images(compartment_id=compartment_id)
        return [Image.from_sdk(i) for i in response.data]

    def handle(self, tool_name: str, arguments: Mapping[str, Any]) -> Any:
        if tool_name == "list_instances":
            return self.list_instances(self.compartment(arguments))
        elif tool_name == "get_instance":
            return self.get_instance(required(arguments, "instanceId"))
        elif tool_name == "launch_instance":
            return self.launch_instance(
                compartment_id=self.compartment(arguments),
                display_name=required(arguments, "displayName"),
                availability_domain=required(arguments, "availabilityDomain"),
                shape=required(arguments, "shape"),
                image_id=required(arguments, "imageId"),
                subnet_id=required(arguments, "subnetId"),
            )
        elif tool_name == "terminate_instance":
            return self.terminate_instance(required(arguments, "instanceId"))
        elif tool_name == "list_shapes":
            return self.list_shapes(self.compartment(arguments))
        elif tool_name == "list_images":
            return self.list_images(self.compartment(arguments))
        else:
            raise self._unknown(tool_name)
