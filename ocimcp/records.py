"""
Resource records and field-level default rules.

Every record is projected fresh from a provider SDK model on each call.
Optional fields are substituted with documented defaults when the provider
omits them:

    text fields      -> ""
    numeric fields   -> 0
    boolean flags    -> False
    timestamps       -> ""   (ISO-8601 when present)
    list fields      -> []

Identifier fields are never defaulted; a missing identifier raises
ProviderContractError.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, Union

from ocimcp.errors import ProviderContractError


# ---------------------------------------------------------------------------
# Field readers
# ---------------------------------------------------------------------------

def _get(obj: Any, attr: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(attr)
    return getattr(obj, attr, None)


def identifier(obj: Any, attr: str, kind: str) -> str:
    """Required identifier; absence is a provider contract violation."""
    value = _get(obj, attr)
    if value is None or value == "":
        raise ProviderContractError(f"{kind} response is missing required identifier '{attr}'")
    return str(value)


def text(obj: Any, attr: str) -> str:
    value = _get(obj, attr)
    return "" if value is None else str(value)


def number(obj: Any, attr: str) -> Union[int, float]:
    value = _get(obj, attr)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def flag(obj: Any, attr: str) -> bool:
    value = _get(obj, attr)
    return value if isinstance(value, bool) else False


def timestamp(obj: Any, attr: str) -> str:
    value = _get(obj, attr)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return "" if value is None else str(value)


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

_CAMEL_OVERRIDES = {
    "size_in_gbs": "sizeInGBs",
    "memory_in_gbs": "memoryInGBs",
}


def _camel(name: str) -> str:
    if name in _CAMEL_OVERRIDES:
        return _CAMEL_OVERRIDES[name]
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _camelize(value: Any) -> Any:
    if isinstance(value, dict):
        return {_camel(k): _camelize(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_camelize(v) for v in value]
    return value


class Record:
    """Mixin giving dataclass records their wire shape."""

    def to_payload(self) -> dict:
        return _camelize(dataclasses.asdict(self))


@dataclass(frozen=True)
class ComputeInstance(Record):
    id: str
    display_name: str
    lifecycle_state: str
    availability_domain: str
    shape: str
    compartment_id: str
    time_created: str

    @classmethod
    def from_sdk(cls, m: Any) -> "ComputeInstance":
        return cls(
            id=identifier(m, "id", "Instance"),
            display_name=text(m, "display_name"),
            lifecycle_state=text(m, "lifecycle_state"),
            availability_domain=text(m, "availability_domain"),
            shape=text(m, "shape"),
            compartment_id=identifier(m, "compartment_id", "Instance"),
            time_created=timestamp(m, "time_created"),
        )


@dataclass(frozen=True)
class InstanceShape(Record):
    shape: str
    processor_description: str
    ocpus: float
    memory_in_gbs: float
    gpus: int
    max_vnic_attachments: int
    networking_bandwidth_in_gbps: float

    @classmethod
    def from_sdk(cls, m: Any) -> "InstanceShape":
        return cls(
            shape=identifier(m, "shape", "Shape"),
            processor_description=text(m, "processor_description"),
            ocpus=number(m, "ocpus"),
            memory_in_gbs=number(m, "memory_in_gbs"),
            gpus=number(m, "gpus"),
            max_vnic_attachments=number(m, "max_vnic_attachments"),
            networking_bandwidth_in_gbps=number(m, "networking_bandwidth_in_gbps"),
        )


@dataclass(frozen=True)
class Image(Record):
    id: str
    display_name: str
    operating_system: str
    operating_system_version: str
    lifecycle_state: str
    compartment_id: str
    time_created: str

    @classmethod
    def from_sdk(cls, m: Any) -> "Image":
        return cls(
            id=identifier(m, "id", "Image"),
            display_name=text(m, "display_name"),
            operating_system=text(m, "operating_system"),
            operating_system_version=text(m, "operating_system_version"),
            lifecycle_state=text(m, "lifecycle_state"),
            # Platform images carry no compartment.
            compartment_id=text(m, "compartment_id"),
            time_created=timestamp(m, "time_created"),
        )


@dataclass(frozen=True)
class VCN(Record):
    id: str
    display_name: str
    cidr_block: str
    lifecycle_state: str
    compartment_id: str
    time_created: str

    @classmethod
    def from_sdk(cls, m: Any) -> "VCN":
        return cls(
            id=identifier(m, "id", "Vcn"),
            display_name=text(m, "display_name"),
            cidr_block=text(m, "cidr_block"),
            lifecycle_state=text(m, "lifecycle_state"),
            compartment_id=identifier(m, "compartment_id", "Vcn"),
            time_created=timestamp(m, "time_created"),
        )


@dataclass(frozen=True)
class Subnet(Record):
    id: str
    display_name: str
    cidr_block: str
    availability_domain: str
    vcn_id: str
    lifecycle_state: str
    compartment_id: str

    @classmethod
    def from_sdk(cls, m: Any) -> "Subnet":
        return cls(
            id=identifier(m, "id", "Subnet"),
            display_name=text(m, "display_name"),
            cidr_block=text(m, "cidr_block"),
            # Regional subnets have no availability domain.
            availability_domain=text(m, "availability_domain"),
            vcn_id=identifier(m, "vcn_id", "Subnet"),
            lifecycle_state=text(m, "lifecycle_state"),
            compartment_id=identifier(m, "compartment_id", "Subnet"),
        )


@dataclass(frozen=True)
class BlockVolume(Record):
    id: str
    display_name: str
    size_in_gbs: int
    lifecycle_state: str
    availability_domain: str
    compartment_id: str
    time_created: str

    @classmethod
    def from_sdk(cls, m: Any) -> "BlockVolume":
        return cls(
            id=identifier(m, "id", "Volume"),
            display_name=text(m, "display_name"),
            size_in_gbs=number(m, "size_in_gbs"),
            lifecycle_state=text(m, "lifecycle_state"),
            availability_domain=text(m, "availability_domain"),
            compartment_id=identifier(m, "compartment_id", "Volume"),
            time_created=timestamp(m, "time_created"),
        )


@dataclass(frozen=True)
class Compartment(Record):
    id: str
    name: str
    description: str
    lifecycle_state: str
    time_created: str

    @classmethod
    def from_sdk(cls, m: Any) -> "Compartment":
        return cls(
            id=identifier(m, "id", "Compartment"),
            name=text(m, "name"),
            description=text(m, "description"),
            lifecycle_state=text(m, "lifecycle_state"),
            time_created=timestamp(m, "time_created"),
        )


@dataclass(frozen=True)
class AvailabilityDomain(Record):
    name: str
    compartment_id: str
    id: str

    @classmethod
    def from_sdk(cls, m: Any) -> "AvailabilityDomain":
        return cls(
            name=identifier(m, "name", "AvailabilityDomain"),
            compartment_id=text(m, "compartment_id"),
            id=text(m, "id"),
        )


@dataclass(frozen=True)
class EndpointConfig(Record):
    subnet_id: str
    is_public_ip_enabled: bool


@dataclass(frozen=True)
class Cluster(Record):
    id: str
    name: str
    kubernetes_version: str
    lifecycle_state: str
    compartment_id: str
    vcn_id: str
    endpoint_config: EndpointConfig
    time_created: str
    time_updated: str

    @classmethod
    def from_sdk(cls, m: Any) -> "Cluster":
        endpoint = _get(m, "endpoint_config")
        metadata = _get(m, "metadata")
        return cls(
            id=identifier(m, "id", "Cluster"),
            name=text(m, "name"),
            kubernetes_version=text(m, "kubernetes_version"),
            lifecycle_state=text(m, "lifecycle_state"),
            compartment_id=identifier(m, "compartment_id", "Cluster"),
            vcn_id=identifier(m, "vcn_id", "Cluster"),
            endpoint_config=EndpointConfig(
                subnet_id=text(endpoint, "subnet_id"),
                is_public_ip_enabled=flag(endpoint, "is_public_ip_enabled"),
            ),
            time_created=timestamp(metadata, "time_created"),
            time_updated=timestamp(metadata, "time_updated"),
        )


@dataclass(frozen=True)
class PlacementConfig(Record):
    availability_domain: str
    subnet_id: str


@dataclass(frozen=True)
class NodeConfigDetails(Record):
    size: int
    placement_configs: list = field(default_factory=list)


@dataclass(frozen=True)
class NodePool(Record):
    id: str
    name: str
    kubernetes_version: str
    lifecycle_state: str
    cluster_id: str
    compartment_id: str
    node_shape: str
    node_config_details: NodeConfigDetails
    time_created: str

    @classmethod
    def from_sdk(cls, m: Any) -> "NodePool":
        details = _get(m, "node_config_details")
        placements = _get(details, "placement_configs") or []
        return cls(
            id=identifier(m, "id", "NodePool"),
            name=text(m, "name"),
            kubernetes_version=text(m, "kubernetes_version"),
            lifecycle_state=text(m, "lifecycle_state"),
            cluster_id=identifier(m, "cluster_id", "NodePool"),
            compartment_id=identifier(m, "compartment_id", "NodePool"),
            node_shape=text(m, "node_shape"),
            node_config_details=NodeConfigDetails(
                size=number(details, "size"),
                placement_configs=[
                    PlacementConfig(
                        availability_domain=text(p, "availability_domain"),
                        subnet_id=identifier(p, "subnet_id", "NodePool placement"),
                    )
                    for p in placements
                ],
            ),
            time_created=timestamp(m, "time_created"),
        )


@dataclass(frozen=True)
class WorkRequestResource(Record):
    entity_type: str
    action_type: str
    identifier: str


@dataclass(frozen=True)
class WorkRequest(Record):
    id: str
    operation_type: str
    status: str
    compartment_id: str
    resources: list
    time_accepted: str
    time_started: str
    time_finished: str

    @classmethod
    def from_sdk(cls, m: Any) -> "WorkRequest":
        return cls(
            id=identifier(m, "id", "WorkRequest"),
            operation_type=text(m, "operation_type"),
            status=text(m, "status"),
            compartment_id=text(m, "compartment_id"),
            resources=[
                WorkRequestResource(
                    entity_type=text(r, "entity_type"),
                    action_type=text(r, "action_type"),
                    identifier=text(r, "identifier"),
                )
                for r in (_get(m, "resources") or [])
            ],
            time_accepted=timestamp(m, "time_accepted"),
            time_started=timestamp(m, "time_started"),
            time_finished=timestamp(m, "time_finished"),
        )


# ---------------------------------------------------------------------------
# Create / update outcomes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Immediate:
    """The provider returned the materialized resource."""

    record: Record


@dataclass(frozen=True)
class Pending:
    """The provider accepted the request as an asynchronous work request."""

    work_request_id: str
    resource_kind: str = "resource"


LaunchResult = Union[Immediate, Pending]


def work_request_id(response: Any) -> Optional[str]:
    headers = getattr(response, "headers", None) or {}
    return headers.get("opc-work-request-id")
