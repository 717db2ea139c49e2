from .errors import (
    FeatureDecodeError,
    GeoJSONDecodeError,
    GeometryDecodeError,
    MissingDiscriminator,
    MissingFeatures,
    MissingProperties,
    NestedGeometryError,
    PropertiesDecodeError,
    TypeMismatch,
    UnknownType,
)
from .objects import BBox, GeoJSONObject, GeoJSONObjectType
from .geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    Position,
    decode_geometry,
    encode_geometry,
)
from .feature import Feature, FeatureCollection, Properties, TypedFeature
from ._codec import (
    GeoJSON,
    convert,
    decode_feature,
    decode_feature_collection,
    encode_feature,
    encode_feature_collection,
    to_builtins,
)

from . import json
from ._version import __version__
