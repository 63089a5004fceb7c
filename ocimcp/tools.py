"""
OCI MCP Tools — static capability catalog.

Declares every tool the server knows about, grouped by resource family,
with its input schema and whether it is destructive.  Destructive tools are
hidden (and refused by the dispatcher) while the server runs in read-only
mode; nothing else about a tool affects authorization.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from ocimcp.errors import UnknownToolError


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CapabilityDescriptor:
    name: str
    description: str
    input_schema: dict
    family: str
    destructive: bool = False

    def definition(self) -> dict:
        """Shape advertised over ``tools/list``."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


# ---------------------------------------------------------------------------
# Schema helpers
# ---------------------------------------------------------------------------

_COMPARTMENT_PROP = {
    "type": "string",
    "description": "Optional compartment ID. Uses default if not provided.",
}


def _schema(properties: Optional[dict] = None, required: Optional[list] = None, compartment: bool = True) -> dict:
    props: dict = {}
    if compartment:
        props["compartmentId"] = dict(_COMPARTMENT_PROP)
    props.update(properties or {})
    schema: dict = {"type": "object", "properties": props}
    if required:
        schema["required"] = list(required)
    return schema


def _ocid(description: str) -> dict:
    return {"type": "string", "description": description}


# ---------------------------------------------------------------------------
# Catalog: family -> descriptors, in advertised order
# ---------------------------------------------------------------------------

COMPUTE = "compute"
NETWORKING = "networking"
STORAGE = "storage"
IDENTITY = "identity"
CONTAINER = "container"

FAMILIES = (COMPUTE, NETWORKING, STORAGE, IDENTITY, CONTAINER)

_CATALOG: dict[str, tuple[CapabilityDescriptor, ...]] = {
    COMPUTE: (
        CapabilityDescriptor(
            "list_instances",
            "List all compute instances in a compartment",
            _schema(),
            COMPUTE,
        ),
        CapabilityDescriptor(
            "get_instance",
            "Get details of a specific compute instance",
            _schema({"instanceId": _ocid("The OCID of the instance to retrieve")}, ["instanceId"], compartment=False),
            COMPUTE,
        ),
        CapabilityDescriptor(
            "launch_instance",
            "Launch a new compute instance",
            _schema(
                {
                    "displayName": {"type": "string", "description": "A user-friendly name for the instance"},
                    "availabilityDomain": {"type": "string", "description": "The availability domain to launch the instance in"},
                    "shape": {"type": "string", "description": "The shape of the instance (e.g., VM.Standard2.1)"},
                    "imageId": _ocid("The OCID of the image to use"),
                    "subnetId": _ocid("The OCID of the subnet to place the instance in"),
                },
                ["displayName", "availabilityDomain", "shape", "imageId", "subnetId"],
            ),
            COMPUTE,
        ),
        CapabilityDescriptor(
            "terminate_instance",
            "Terminate a compute instance",
            _schema({"instanceId": _ocid("The OCID of the instance to terminate")}, ["instanceId"], compartment=False),
            COMPUTE,
            destructive=True,
        ),
        CapabilityDescriptor(
            "list_shapes",
            "List available compute shapes in a compartment",
            _schema(),
            COMPUTE,
        ),
        CapabilityDescriptor(
            "list_images",
            "List available images in a compartment",
            _schema(),
            COMPUTE,
        ),
    ),
    NETWORKING: (
        CapabilityDescriptor(
            "list_vcns",
            "List all Virtual Cloud Networks (VCNs) in a compartment",
            _schema(),
            NETWORKING,
        ),
        CapabilityDescriptor(
            "list_subnets",
            "List all subnets in a compartment or VCN",
            _schema({"vcnId": _ocid("Optional VCN ID to filter subnets by specific VCN")}),
            NETWORKING,
        ),
    ),
    STORAGE: (
        CapabilityDescriptor(
            "list_volumes",
            "List all block volumes in a compartment",
            _schema(),
            STORAGE,
        ),
    ),
    IDENTITY: (
        CapabilityDescriptor(
            "list_compartments",
            "List all compartments in the tenancy",
            _schema(compartment=False),
            IDENTITY,
        ),
        CapabilityDescriptor(
            "list_availability_domains",
            "List availability domains in a compartment",
            _schema(),
            IDENTITY,
        ),
    ),
    CONTAINER: (
        CapabilityDescriptor(
            "list_clusters",
            "List all Kubernetes clusters in a compartment",
            _schema(),
            CONTAINER,
        ),
        CapabilityDescriptor(
            "get_cluster",
            "Get details of a specific Kubernetes cluster",
            _schema({"clusterId": _ocid("The OCID of the cluster to retrieve")}, ["clusterId"], compartment=False),
            CONTAINER,
        ),
        CapabilityDescriptor(
            "create_cluster",
            "Create a new Kubernetes cluster. Returns a work request to poll with get_work_request.",
            _schema(
                {
                    "name": {"type": "string", "description": "A user-friendly name for the cluster"},
                    "vcnId": _ocid("The OCID of the VCN to place the cluster in"),
                    "kubernetesVersion": {"type": "string", "description": "The Kubernetes version for the cluster (e.g., v1.28.2)"},
                    "subnetId": _ocid("The OCID of the subnet for the cluster endpoint"),
                    "isPublicIpEnabled": {
                        "type": "boolean",
                        "description": "Whether to enable public IP for the cluster endpoint",
                        "default": False,
                    },
                },
                ["name", "vcnId", "kubernetesVersion", "subnetId"],
            ),
            CONTAINER,
        ),
        CapabilityDescriptor(
            "delete_cluster",
            "Delete a Kubernetes cluster",
            _schema({"clusterId": _ocid("The OCID of the cluster to delete")}, ["clusterId"], compartment=False),
            CONTAINER,
            destructive=True,
        ),
        CapabilityDescriptor(
            "list_node_pools",
            "List all node pools in a compartment or cluster",
            _schema({"clusterId": _ocid("Optional cluster ID to filter node pools by specific cluster")}),
            CONTAINER,
        ),
        CapabilityDescriptor(
            "get_node_pool",
            "Get details of a specific node pool",
            _schema({"nodePoolId": _ocid("The OCID of the node pool to retrieve")}, ["nodePoolId"], compartment=False),
            CONTAINER,
        ),
        CapabilityDescriptor(
            "create_node_pool",
            "Create a new node pool in a Kubernetes cluster. Returns a work request to poll with get_work_request.",
            _schema(
                {
                    "name": {"type": "string", "description": "A user-friendly name for the node pool"},
                    "clusterId": _ocid("The OCID of the cluster to create the node pool in"),
                    "kubernetesVersion": {"type": "string", "description": "The Kubernetes version for the node pool"},
                    "nodeShape": {"type": "string", "description": "The shape of the nodes (e.g., VM.Standard2.1)"},
                    "size": {"type": "number", "description": "The number of nodes in the node pool"},
                    "availabilityDomain": {"type": "string", "description": "The availability domain for the nodes"},
                    "subnetId": _ocid("The OCID of the subnet for the nodes"),
                },
                ["name", "clusterId", "kubernetesVersion", "nodeShape", "size", "availabilityDomain", "subnetId"],
            ),
            CONTAINER,
        ),
        CapabilityDescriptor(
            "delete_node_pool",
            "Delete a node pool",
            _schema({"nodePoolId": _ocid("The OCID of the node pool to delete")}, ["nodePoolId"], compartment=False),
            CONTAINER,
            destructive=True,
        ),
        CapabilityDescriptor(
            "get_kubeconfig",
            "Get the kubeconfig file for a Kubernetes cluster",
            _schema({"clusterId": _ocid("The OCID of the cluster to get kubeconfig for")}, ["clusterId"], compartment=False),
            CONTAINER,
        ),
        CapabilityDescriptor(
            "get_work_request",
            "Get the status of a container engine work request (e.g., from create_cluster)",
            _schema({"workRequestId": _ocid("The OCID of the work request")}, ["workRequestId"], compartment=False),
            CONTAINER,
        ),
    ),
}


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

class CapabilityRegistry:
    """Read-only view of the catalog filtered by the safety flag."""

    def __init__(self, read_only: bool, catalog: Optional[dict[str, tuple[CapabilityDescriptor, ...]]] = None):
        self.read_only = read_only
        self._catalog = _CATALOG if catalog is None else catalog

    def _all(self) -> Iterator[CapabilityDescriptor]:
        for family in self._catalog:
            yield from self._catalog[family]

    def list_capabilities(self) -> list[CapabilityDescriptor]:
        """Every descriptor callable under the current mode, in catalog order."""
        if self.read_only:
            return [d for d in self._all() if not d.destructive]
        return list(self._all())

    def lookup(self, name: str) -> CapabilityDescriptor:
        """Find *name* across all families regardless of mode.

        Raises UnknownToolError if no family declares it.
        """
        for descriptor in self._all():
            if descriptor.name == name:
                return descriptor
        raise UnknownToolError(f"Unknown tool: {name}")


def build_tool_definitions(read_only: bool) -> list[dict]:
    """Build the ``tools/list`` payload for the given mode."""
    return [d.definition() for d in CapabilityRegistry(read_only).list_capabilities()]
