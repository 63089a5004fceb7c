"""
Tests for ocimcp.records — projection of SDK models and default rules.
"""

import os
import sys
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ocimcp.errors import ProviderContractError
from ocimcp.records import (
    AvailabilityDomain,
    BlockVolume,
    Cluster,
    ComputeInstance,
    InstanceShape,
    NodePool,
    Subnet,
    WorkRequest,
    flag,
    number,
    text,
    timestamp,
    work_request_id,
)


CREATED = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)


# =========================================================================
# Tests: field readers
# =========================================================================

class TestFieldReaders:

    def test_text_default(self):
        assert text(SimpleNamespace(display_name=None), "display_name") == ""
        assert text(SimpleNamespace(), "display_name") == ""
        assert text(None, "display_name") == ""

    def test_number_default(self):
        assert number(SimpleNamespace(ocpus=None), "ocpus") == 0
        assert number(SimpleNamespace(ocpus="4"), "ocpus") == 0
        assert number(SimpleNamespace(ocpus=True), "ocpus") == 0
        assert number(SimpleNamespace(ocpus=2.5), "ocpus") == 2.5

    def test_flag_default(self):
        assert flag(SimpleNamespace(is_public_ip_enabled=None), "is_public_ip_enabled") is False
        assert flag(SimpleNamespace(is_public_ip_enabled=True), "is_public_ip_enabled") is True

    def test_timestamp(self):
        assert timestamp(SimpleNamespace(time_created=CREATED), "time_created") == "2024-03-01T12:30:00+00:00"
        assert timestamp(SimpleNamespace(time_created=None), "time_created") == ""

    def test_reads_dicts(self):
        assert text({"name": "x"}, "name") == "x"

    def test_work_request_id(self):
        assert work_request_id(SimpleNamespace(headers={"opc-work-request-id": "wr1"})) == "wr1"
        assert work_request_id(SimpleNamespace(headers={})) is None
        assert work_request_id(SimpleNamespace()) is None


# =========================================================================
# Tests: records
# =========================================================================

class TestComputeInstance:

    def test_all_fields_round_trip(self):
        model = SimpleNamespace(
            id="ocid1.instance.oc1..a", display_name="web-1", lifecycle_state="RUNNING",
            availability_domain="AD-1", shape="VM.Standard.E4.Flex",
            compartment_id="ocid1.compartment.oc1..c", time_created=CREATED,
        )
        assert ComputeInstance.from_sdk(model).to_payload() == {
            "id": "ocid1.instance.oc1..a",
            "displayName": "web-1",
            "lifecycleState": "RUNNING",
            "availabilityDomain": "AD-1",
            "shape": "VM.Standard.E4.Flex",
            "compartmentId": "ocid1.compartment.oc1..c",
            "timeCreated": "2024-03-01T12:30:00+00:00",
        }

    def test_optional_fields_default(self):
        model = SimpleNamespace(id="ocid1.instance", compartment_id="ocid1.compartment")
        payload = ComputeInstance.from_sdk(model).to_payload()
        assert payload["displayName"] == ""
        assert payload["lifecycleState"] == ""
        assert payload["shape"] == ""
        assert payload["timeCreated"] == ""

    def test_missing_id_is_contract_violation(self):
        model = SimpleNamespace(id=None, compartment_id="ocid1.compartment", display_name="x")
        with pytest.raises(ProviderContractError, match="'id'"):
            ComputeInstance.from_sdk(model)


class TestShape:

    def test_numeric_defaults(self):
        payload = InstanceShape.from_sdk(SimpleNamespace(shape="VM.Standard2.1")).to_payload()
        assert payload == {
            "shape": "VM.Standard2.1",
            "processorDescription": "",
            "ocpus": 0,
            "memoryInGBs": 0,
            "gpus": 0,
            "maxVnicAttachments": 0,
            "networkingBandwidthInGbps": 0,
        }

    def test_missing_shape_name(self):
        with pytest.raises(ProviderContractError):
            InstanceShape.from_sdk(SimpleNamespace(ocpus=1))


class TestOtherRecords:

    def test_regional_subnet_has_empty_availability_domain(self):
        model = SimpleNamespace(
            id="ocid1.subnet", display_name="s", cidr_block="10.0.0.0/24", availability_domain=None,
            vcn_id="ocid1.vcn", lifecycle_state="AVAILABLE", compartment_id="ocid1.compartment",
        )
        assert Subnet.from_sdk(model).to_payload()["availabilityDomain"] == ""

    def test_volume_size_default(self):
        model = SimpleNamespace(id="ocid1.volume", compartment_id="ocid1.compartment")
        assert BlockVolume.from_sdk(model).to_payload()["sizeInGBs"] == 0

    def test_availability_domain(self):
        model = SimpleNamespace(name="Uocm:PHX-AD-1", compartment_id="ocid1.tenancy", id=None)
        assert AvailabilityDomain.from_sdk(model).to_payload() == {
            "name": "Uocm:PHX-AD-1", "compartmentId": "ocid1.tenancy", "id": "",
        }


class TestCluster:

    def test_nested_fields(self):
        model = SimpleNamespace(
            id="ocid1.cluster", name="k8s", kubernetes_version="v1.28.2", lifecycle_state="ACTIVE",
            compartment_id="ocid1.compartment", vcn_id="ocid1.vcn",
            endpoint_config=SimpleNamespace(subnet_id="ocid1.subnet", is_public_ip_enabled=True),
            metadata=SimpleNamespace(time_created=CREATED, time_updated=None),
        )
        payload = Cluster.from_sdk(model).to_payload()
        assert payload["endpointConfig"] == {"subnetId": "ocid1.subnet", "isPublicIpEnabled": True}
        assert payload["vcnId"] == "ocid1.vcn"
        assert payload["timeCreated"] == "2024-03-01T12:30:00+00:00"
        assert payload["timeUpdated"] == ""

    def test_missing_endpoint_config_defaults(self):
        model = SimpleNamespace(id="ocid1.cluster", compartment_id="ocid1.compartment", vcn_id="ocid1.vcn")
        payload = Cluster.from_sdk(model).to_payload()
        assert payload["endpointConfig"] == {"subnetId": "", "isPublicIpEnabled": False}

    def test_missing_vcn_reference(self):
        model = SimpleNamespace(id="ocid1.cluster", compartment_id="ocid1.compartment", vcn_id=None)
        with pytest.raises(ProviderContractError, match="vcn_id"):
            Cluster.from_sdk(model)


class TestNodePool:

    def test_placements(self):
        model = SimpleNamespace(
            id="ocid1.nodepool", name="pool", kubernetes_version="v1.28.2", lifecycle_state="ACTIVE",
            cluster_id="ocid1.cluster", compartment_id="ocid1.compartment", node_shape="VM.Standard.E4.Flex",
            node_config_details=SimpleNamespace(
                size=3,
                placement_configs=[SimpleNamespace(availability_domain="AD-1", subnet_id="ocid1.subnet")],
            ),
        )
        payload = NodePool.from_sdk(model).to_payload()
        assert payload["nodeConfigDetails"] == {
            "size": 3,
            "placementConfigs": [{"availabilityDomain": "AD-1", "subnetId": "ocid1.subnet"}],
        }
        assert payload["timeCreated"] == ""

    def test_missing_node_config(self):
        model = SimpleNamespace(id="ocid1.nodepool", cluster_id="ocid1.cluster", compartment_id="ocid1.compartment")
        payload = NodePool.from_sdk(model).to_payload()
        assert payload["nodeConfigDetails"] == {"size": 0, "placementConfigs": []}


class TestWorkRequest:

    def test_resources(self):
        model = SimpleNamespace(
            id="ocid1.workrequest", operation_type="CLUSTER_CREATE", status="SUCCEEDED",
            compartment_id="ocid1.compartment",
            resources=[SimpleNamespace(entity_type="cluster", action_type="CREATED", identifier="ocid1.cluster")],
            time_accepted=CREATED, time_started=None, time_finished=None,
        )
        payload = WorkRequest.from_sdk(model).to_payload()
        assert payload["status"] == "SUCCEEDED"
        assert payload["resources"] == [
            {"entityType": "cluster", "actionType": "CREATED", "identifier": "ocid1.cluster"},
        ]
        assert payload["timeStarted"] == ""
