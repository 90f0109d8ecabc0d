"""
Pydantic models for the documents served by the content endpoint.
"""

from pydantic import BaseModel, ConfigDict, Field


class AssetRecord(BaseModel):
    """One remote asset: its name, content hash and optional pack membership."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    content_hash: str = Field(alias="md5")
    pack_id: str | None = Field(default=None, alias="pid")


class PackRecord(BaseModel):
    """A downloadable bundle grouping assets whose ``pack_id`` equals its name."""

    model_config = ConfigDict(frozen=True)

    name: str


class UpdateManifest(BaseModel):
    """A point-in-time view of every asset and pack on the remote store."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    assets: tuple[AssetRecord, ...] = Field(alias="abInfos")
    packs: tuple[PackRecord, ...] = Field(alias="packInfos")

    def packless_assets(self) -> list[AssetRecord]:
        return [asset for asset in self.assets if asset.pack_id is None]


class ResourceVersion(BaseModel):
    """Version document; ``res_version`` selects the asset directory on the server."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    res_version: str = Field(alias="resVersion")
    client_version: str | None = Field(default=None, alias="clientVersion")
