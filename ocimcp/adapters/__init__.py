"""Resource adapters, one per resource family."""

from __future__ import annotations

import oci

from ocimcp.adapters.base import ResourceAdapter
from ocimcp.adapters.compute import ComputeAdapter
from ocimcp.adapters.container import ContainerAdapter
from ocimcp.adapters.identity import IdentityAdapter
from ocimcp.adapters.network import NetworkAdapter
from ocimcp.adapters.storage import StorageAdapter
from ocimcp.config import CompartmentScope


def build_adapters(auth, scope: CompartmentScope) -> dict[str, ResourceAdapter]:
    """Create every SDK client from the one shared AuthHandle, keyed by family."""
    return {
        "compute": ComputeAdapter(auth.client(oci.core.ComputeClient), scope),
        "networking": NetworkAdapter(auth.client(oci.core.VirtualNetworkClient), scope),
        "storage": StorageAdapter(auth.client(oci.core.BlockstorageClient), scope),
        "identity": IdentityAdapter(auth.client(oci.identity.IdentityClient), scope),
        "container": ContainerAdapter(auth.client(oci.container_engine.ContainerEngineClient), scope),
    }


__all__ = [
    "ComputeAdapter",
    "ContainerAdapter",
    "IdentityAdapter",
    "NetworkAdapter",
    "ResourceAdapter",
    "StorageAdapter",
    "build_adapters",
]
