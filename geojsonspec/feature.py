"""Feature and FeatureCollection objects.

Features come in two flavors, chosen by type rather than per instance:

- `Feature` keeps its properties as an open ``dict[str, Any]`` (the *loose*
  mode). Two loose features are equal if their geometries are equal, the
  ``id`` and ``properties`` are ignored by both ``==`` and ``hash``. Features
  describing the same geometry are treated as duplicates, whatever
  attributes are attached to them.

- `TypedFeature` carries properties of a caller supplied type (the *typed*
  mode). Two typed features are equal only if their ``bbox``, ``id``,
  ``geometry`` and ``properties`` are all equal.

This asymmetry is intentional and existing deduplication code depends on it.
"""

from typing import Any, ClassVar, Dict, Generic, Optional, Tuple, TypeVar, Union

import msgspec

from ._hashing import fold, structural_hash
from .objects import BBox, GeoJSONObject, GeoJSONObjectType

__all__ = ("Properties", "Feature", "TypedFeature", "FeatureCollection", "AnyFeature")


def __dir__():
    return __all__


G = TypeVar("G")
P = TypeVar("P")

# The properties type of loose features.
Properties = Dict[str, Any]


def _ne(self, other):
    eq = self.__eq__(other)
    return eq if eq is NotImplemented else not eq


class Feature(GeoJSONObject, Generic[G], tag="Feature"):
    """A GeoJSON Feature with untyped properties.

    Equality and hashing only consider the geometry: features with equal
    geometries are equal even if their ``id`` or ``properties`` differ. Use
    `TypedFeature` if properties should take part in comparisons.

    Parameters
    ----------
    geometry: Geometry or None
        The feature's geometry, ``None`` for an unlocated feature.
    properties: dict, optional
        Arbitrary JSON-compatible properties. Defaults to an empty dict.
    id: str, optional
        An identifier for the feature.
    bbox: tuple of float, optional
        The bounding box of the feature.
    """

    _geojson_type: ClassVar = GeoJSONObjectType.FEATURE

    geometry: Optional[G]
    properties: Optional[Properties] = msgspec.field(default_factory=dict)
    id: Optional[str] = None

    @classmethod
    def create(
        cls,
        geometry: Optional[G],
        properties: Optional[Properties] = None,
        id: Optional[str] = None,
        *,
        bbox: Optional[BBox] = None,
    ) -> "Feature[G]":
        """Create a loose feature, treating ``None`` properties as empty."""
        return cls(
            geometry, {} if properties is None else properties, id, bbox=bbox
        )

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.geometry == other.geometry

    __ne__ = _ne

    def __hash__(self):
        return hash(self.geometry)


class TypedFeature(GeoJSONObject, Generic[G, P], tag="Feature"):
    """A GeoJSON Feature with properties of a fixed type.

    Unlike `Feature`, equality and hashing consider every member: the
    ``bbox``, ``id``, ``geometry`` and ``properties``.

    Like any ``str`` hash, the hash is only stable within one interpreter
    process; it changes with ``PYTHONHASHSEED``. Don't persist it.

    Parameters
    ----------
    geometry: Geometry or None
        The feature's geometry, ``None`` for an unlocated feature.
    properties: P
        The feature's properties, usually a `msgspec.Struct` or dataclass.
    id: str, optional
        An identifier for the feature.
    bbox: tuple of float, optional
        The bounding box of the feature.
    """

    _geojson_type: ClassVar = GeoJSONObjectType.FEATURE

    geometry: Optional[G]
    properties: P
    id: Optional[str] = None

    @classmethod
    def create(
        cls,
        geometry: Optional[G],
        properties: P,
        id: Optional[str] = None,
        *,
        bbox: Optional[BBox] = None,
    ) -> "TypedFeature[G, P]":
        return cls(geometry, properties, id, bbox=bbox)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return (
            self.bbox == other.bbox
            and self.id == other.id
            and self.geometry == other.geometry
            and self.properties == other.properties
        )

    __ne__ = _ne

    def __hash__(self):
        return fold(
            self._envelope_hash(),
            hash(self.geometry),
            hash(self.id),
            structural_hash(self.properties),
        )


AnyFeature = Union[Feature[Any], TypedFeature[Any, Any]]


class FeatureCollection(GeoJSONObject, Generic[P], tag="FeatureCollection"):
    """An ordered collection of features.

    The features are stored as a tuple, a list passed in is copied. Two
    collections are equal if their ``bbox`` is equal and their features are
    equal pairwise, in order.

    Hashes fold the features' hashes and so are only stable within one
    interpreter process.

    Parameters
    ----------
    features: tuple of Feature or TypedFeature, optional
        The features, defaults to none.
    bbox: tuple of float, optional
        The bounding box of the collection.
    """

    _geojson_type: ClassVar = GeoJSONObjectType.FEATURE_COLLECTION

    features: Tuple[AnyFeature, ...] = ()

    def __post_init__(self):
        if not isinstance(self.features, tuple):
            msgspec.structs.force_setattr(self, "features", tuple(self.features))

    @classmethod
    def create(cls, *features: AnyFeature, bbox: Optional[BBox] = None):
        return cls(features, bbox=bbox)

    def append(self, feature: AnyFeature) -> "FeatureCollection[P]":
        """Return a new collection with ``feature`` added at the end."""
        return type(self)(self.features + (feature,), bbox=self.bbox)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self.bbox == other.bbox and self.features == other.features

    __ne__ = _ne

    def __hash__(self):
        return fold(self._envelope_hash(), *map(hash, self.features))
