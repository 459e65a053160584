"""ThemeConfig: a deserialized theme document.

This is the single model the engine consumes. It is validated once, is
immutable afterwards, and carries the document's own defaults so runtime
code reads fields directly instead of guessing fallbacks.

Reading the document from disk or the network is the caller's job; the
model is built from an already-deserialized mapping (see
``maptheme.schemas.resolve.load_theme``).
"""

from typing import Literal, Optional, Union

from pydantic import Field, StrictInt, StrictStr, model_validator

from maptheme.schemas.base import ThemeBaseModel
from maptheme.schemas.color_scale import ColorScale
from maptheme.schemas.dimension import Dimension
from maptheme.schemas.schema import Schema


DEFAULT_BASEMAP_URL = "https://cartodb-basemaps-{s}.global.ssl.fastly.net/light_nolabels/{z}/{x}/{y}.png"
DEFAULT_BASEMAP_LABELS_URL = "https://cartodb-basemaps-{s}.global.ssl.fastly.net/light_only_labels/{z}/{x}/{y}.png"

AdminLevel = Literal[0, 1, 2]
LocationID = Union[StrictInt, StrictStr]


# =============================================================================
# Data representation
# =============================================================================

class DataFormat(ThemeBaseModel):
    """Details of the data representation."""
    raster: bool = True
    aggregate: bool = True
    precision_aggregate: Literal["single", "double"] = "single"
    no_data_value: float = -999999.0
    native_zoom: int = Field(5, ge=0)
    max_admin_level: AdminLevel = 2


class DefaultDisplay(ThemeBaseModel):
    """Display settings used when the theme is first loaded."""
    mode: Literal["geo", "aggregate"] = "aggregate"
    level: AdminLevel = 1


# =============================================================================
# Geography
# =============================================================================

class AdminFieldnames(ThemeBaseModel):
    """Metadata field names of an administrative shapefile."""
    id: str
    name: str


class DisputesFieldnames(AdminFieldnames):
    """Metadata field names of the disputed-territories shapefile."""
    claimants: str


class AdminFiles(ThemeBaseModel):
    """Administrative shapefiles, indexed by admin level."""
    filepaths: Optional[list[str]] = None
    fieldnames: Optional[list[AdminFieldnames]] = None


class DisputesFile(ThemeBaseModel):
    """Disputed-territories shapefile."""
    filepath: str = "shapefiles/disputes/disputes.shp"
    fieldnames: DisputesFieldnames = Field(
        default_factory=lambda: DisputesFieldnames(id="ADM0_CODE", name="ADM0_NAME", claimants="claimants")
    )


class LocationMetadata(ThemeBaseModel):
    id: LocationID
    name: str


class CustomText(ThemeBaseModel):
    """Text shown for the listed locations and their descendants."""
    locations: list[LocationID]
    text: str


class Geography(ThemeBaseModel):
    """Configuration related to geographical features."""
    admin0_locations: Optional[list[LocationID]] = None
    no_descendants: list[LocationID] = Field(default_factory=list)
    exclude_raster: list[LocationID] = Field(default_factory=list)
    exclude_aggregate: list[LocationID] = Field(default_factory=list)
    territorial_disputes: bool = True
    admin_files: AdminFiles = Field(default_factory=AdminFiles)
    disputes_file: DisputesFile = Field(default_factory=DisputesFile)
    root_location: LocationMetadata = Field(
        default_factory=lambda: LocationMetadata(id=0, name="All")
    )
    custom_text: list[CustomText] = Field(default_factory=list)

    def admin_filepath(self, level: int) -> str:
        """Shapefile path for an admin level (``shapefiles/admin{N}/admin{N}.shp`` by default)."""
        filepaths = self.admin_files.filepaths
        if filepaths is not None and level < len(filepaths):
            return filepaths[level]
        return f"shapefiles/admin{level}/admin{level}.shp"

    def admin_fieldnames(self, level: int) -> AdminFieldnames:
        """Field names for an admin level (``ADM{N}_CODE`` / ``ADM{N}_NAME`` by default)."""
        fieldnames = self.admin_files.fieldnames
        if fieldnames is not None and level < len(fieldnames):
            return fieldnames[level]
        return AdminFieldnames(id=f"ADM{level}_CODE", name=f"ADM{level}_NAME")

    def has_raster(self, location_id: LocationID) -> bool:
        return location_id not in self.exclude_raster

    def has_aggregate(self, location_id: LocationID) -> bool:
        return location_id not in self.exclude_aggregate


# =============================================================================
# Main ThemeConfig
# =============================================================================

class ThemeConfig(ThemeBaseModel):
    """Top-level theme configuration.

    Usage
    -----
        theme = load_theme(document)
        resolver = ThemeResolver(theme)
        resolution = resolver.resolve({"year": 2010, "age": "children"})

    Only self-contained invariants are enforced here (unique names).
    Cross-references between dimensions, schemas and color scales are
    checked by ``maptheme.contracts`` when an entity is first resolved.
    """

    version: Optional[str] = None
    name: str
    display_name: str
    data_format: DataFormat = Field(default_factory=DataFormat)
    default_display: DefaultDisplay = Field(default_factory=DefaultDisplay)
    download_url: Optional[str] = None
    filepath_raster_mask: Optional[str] = None
    geography: Geography = Field(default_factory=Geography)
    basemap_url: str = DEFAULT_BASEMAP_URL
    basemap_labels_url: str = DEFAULT_BASEMAP_LABELS_URL
    dimensions: list[Dimension]
    schemas: list[Schema] = Field(min_length=1)
    color_scales: list[ColorScale] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_names(self):
        """Dimension and schema names are unique."""
        for kind, names in (
            ("dimension", [d.name for d in self.dimensions]),
            ("schema", [s.name for s in self.schemas]),
        ):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            if duplicates:
                raise ValueError(f"Duplicate {kind} names: {duplicates}")
        return self

    def get_dimension(self, name: str) -> Optional[Dimension]:
        for dimension in self.dimensions:
            if dimension.name == name:
                return dimension
        return None

    def get_schema(self, name: str) -> Optional[Schema]:
        for schema in self.schemas:
            if schema.name == name:
                return schema
        return None

    def admin_filepaths(self) -> list[str]:
        """Shapefile path for every admin level up to ``max_admin_level``."""
        return [
            self.geography.admin_filepath(level)
            for level in range(self.data_format.max_admin_level + 1)
        ]
