"""
Container engine adapter — clusters, node pools, kubeconfig and work requests
via ``oci.container_engine.ContainerEngineClient``.

Cluster and node pool mutations follow the v20180222 container engine
contract: the provider accepts them as asynchronous work requests and
returns only an ``opc-work-request-id`` header, so create operations return
``Pending``.  Callers poll ``get_work_request`` for completion.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import oci

from ocimcp.adapters.base import ResourceAdapter, flag, optional, required
from ocimcp.config import CompartmentScope
from ocimcp.errors import ProviderContractError
from ocimcp.records import Cluster, LaunchResult, NodePool, Pending, WorkRequest, work_request_id

logger = logging.getLogger("oci-mcp.adapters.container")

_CHUNK_SIZE = 64 * 1024


def read_stream(data: Any) -> str:
    """Drain a streamed SDK response body completely and decode it as UTF-8."""
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    if isinstance(data, (bytes, bytearray)):
        return bytes(data).decode("utf-8")

    raw = getattr(data, "raw", None)
    if raw is not None and hasattr(raw, "stream"):
        buf = b"".join(raw.stream(_CHUNK_SIZE, decode_content=True))
    elif hasattr(data, "iter_content"):
        buf = b"".join(data.iter_content(chunk_size=_CHUNK_SIZE))
    elif hasattr(data, "read"):
        buf = data.read()
    else:
        buf = getattr(data, "content", b"")
    if isinstance(buf, str):
        return buf
    return bytes(buf).decode("utf-8")


def _pending(response: Any, kind: str) -> Pending:
    wr_id = work_request_id(response)
    if not wr_id:
        raise ProviderContractError(f"{kind} request accepted without an opc-work-request-id header")
    return Pending(work_request_id=wr_id, resource_kind=kind)


def _initiated(kind: str, resource_id: str, verb: str, response: Any) -> dict:
    result = {"message": f"{kind} {resource_id} {verb} initiated"}
    wr_id = work_request_id(response)
    if wr_id:
        result["workRequestId"] = wr_id
    return result


class ContainerAdapter(ResourceAdapter):
    family = "container"

    def __init__(self, container_client: Any, scope: CompartmentScope):
        super().__init__(scope)
        self._ce = container_client

    # --- Clusters ---

    def list_clusters(self, compartment_id: str) -> list[Cluster]:
        response = self._ce.list_clusters(compartment_id=compartment_id)
        return [Cluster.from_sdk(c) for c in response.data]

    def get_cluster(self, cluster_id: str) -> Cluster:
        response = self._ce.get_cluster(cluster_id=cluster_id)
        return Cluster.from_sdk(response.data)

    def create_cluster(
        self,
        compartment_id: str,
        name: str,
        vcn_id: str,
        kubernetes_version: str,
        subnet_id: str,
        is_public_ip_enabled: bool = False,
    ) -> LaunchResult:
        details = oci.container_engine.models.CreateClusterDetails(
            name=name,
            compartment_id=compartment_id,
            vcn_id=vcn_id,
            kubernetes_version=kubernetes_version,
            endpoint_config=oci.container_engine.models.CreateClusterEndpointConfigDetails(
                subnet_id=subnet_id,
                is_public_ip_enabled=is_public_ip_enabled,
            ),
        )
        response = self._ce.create_cluster(create_cluster_details=details)
        return _pending(response, "Cluster")

    def delete_cluster(self, cluster_id: str) -> dict:
        response = self._ce.delete_cluster(cluster_id=cluster_id)
        return _initiated("Cluster", cluster_id, "deletion", response)

    # --- Node pools ---

    def list_node_pools(self, compartment_id: str, cluster_id: Optional[str] = None) -> list[NodePool]:
        kwargs = {"compartment_id": compartment_id}
        if cluster_id:
            kwargs["cluster_id"] = cluster_id
        response = self._ce.list_node_pools(**kwargs)
        return [NodePool.from_sdk(p) for p in response.data]

    def get_node_pool(self, node_pool_id: str) -> NodePool:
        response = self._ce.get_node_pool(node_pool_id=node_pool_id)
        return NodePool.from_sdk(response.data)

    def create_node_pool(
        self,
        compartment_id: str,
        name: str,
        cluster_id: str,
        kubernetes_version: str,
        node_shape: str,
        size: int,
        availability_domain: str,
        subnet_id: str,
    ) -> LaunchResult:
        models = oci.container_engine.models
        details = models.CreateNodePoolDetails(
            compartment_id=compartment_id,
            cluster_id=cluster_id,
            name=name,
            kubernetes_version=kubernetes_version,
            node_shape=node_shape,
            node_config_details=models.CreateNodePoolNodeConfigDetails(
                size=size,
                placement_configs=[
                    models.NodePoolPlacementConfigDetails(
                        availability_domain=availability_domain,
                        subnet_id=subnet_id,
                    )
                ],
            ),
        )
        response = self._ce.create_node_pool(create_node_pool_details=details)
        return _pending(response, "NodePool")

    def delete_node_pool(self, node_pool_id: str) -> dict:
        response = self._ce.delete_node_pool(node_pool_id=node_pool_id)
        return _initiated("Node pool", node_pool_id, "deletion", response)

    # --- Access and tracking ---

    def get_kubeconfig(self, cluster_id: str) -> dict:
        response = self._ce.create_kubeconfig(cluster_id=cluster_id)
        kubeconfig = read_stream(response.data)
        logger.debug("Fetched kubeconfig for %s (%d bytes)", cluster_id, len(kubeconfig))
        return {
            "kubeconfig": kubeconfig,
            "message": "Kubeconfig retrieved successfully. Save this to ~/.kube/config to use with kubectl.",
        }

    def get_work_request(self, work_request_id: str) -> WorkRequest:
        response = self._ce.get_work_request(work_request_id=work_request_id)
        return WorkRequest.from_sdk(response.data)

    def handle(self, tool_name: str, arguments: Mapping[str, Any]) -> Any:
        if tool_name == "list_clusters":
            return self.list_clusters(self.compartment(arguments))
        elif tool_name == "get_cluster":
            return self.get_cluster(required(arguments, "clusterId"))
        elif tool_name == "create_cluster":
            return self.create_cluster(
                compartment_id=self.compartment(arguments),
                name=required(arguments, "name"),
                vcn_id=required(arguments, "vcnId"),
                kubernetes_version=required(arguments, "kubernetesVersion"),
                subnet_id=required(arguments, "subnetId"),
                is_public_ip_enabled=flag(arguments, "isPublicIpEnabled"),
            )
        elif tool_name == "delete_cluster":
            return self.delete_cluster(required(arguments, "clusterId"))
        elif tool_name == "list_node_pools":
            return self.list_node_pools(self.compartment(arguments), optional(arguments, "clusterId"))
        elif tool_name == "get_node_pool":
            return self.get_node_pool(required(arguments, "nodePoolId"))
        elif tool_name == "create_node_pool":
            return self.create_node_pool(
                compartment_id=self.compartment(arguments),
                name=required(arguments, "name"),
                cluster_id=required(arguments, "clusterId"),
                kubernetes_version=required(arguments, "kubernetesVersion"),
                node_shape=required(arguments, "nodeShape"),
                size=required(arguments, "size", int),
                availability_domain=required(arguments, "availabilityDomain"),
                subnet_id=required(arguments, "subnetId"),
            )
        elif tool_name == "delete_node_pool":
            return self.delete_node_pool(required(arguments, "nodePoolId"))
        elif tool_name == "get_kubeconfig":
            return self.get_kubeconfig(required(arguments, "clusterId"))
        elif tool_name == "get_work_request":
            return self.get_work_request(required(arguments, "workRequestId"))
        else:
            raise self._unknown(tool_name)
