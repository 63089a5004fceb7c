"""Storage adapter — block volumes via ``oci.core.BlockstorageClient``."""

from __future__ import annotations

from typing import Any, Mapping

from ocimcp.adapters.base import ResourceAdapter
from ocimcp.config import CompartmentScope
from ocimcp.records import BlockVolume


class StorageAdapter(ResourceAdapter):
    family = "storage"

    def __init__(self, blockstorage_client: Any, scope: CompartmentScope):
        super().__init__(scope)
        self._blockstorage = blockstorage_client

    def list_volumes(self, compartment_id: str) -> list[BlockVolume]:
        response = self._blockstorage.list_volumes(compartment_id=compartment_id)
        return [BlockVolume.from_sdk(v) for v in response.data]

    def handle(self, tool_name: str, arguments: Mapping[str, Any]) -> Any:
        if tool_name == "list_volumes":
            return self.list_volumes(self.compartment(arguments))
        else:
            raise self._unknown(tool_name)
