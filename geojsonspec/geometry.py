"""The seven GeoJSON geometry variants.

All variants are frozen, tagged structs. Equality and hashing are the ones
msgspec generates: two geometries are equal if they're the same variant with
equal members.
"""

from typing import Annotated, Any, ClassVar, Dict, Tuple, Type, Union

import msgspec

from .errors import GeometryDecodeError, TypeMismatch, split_location
from .objects import (
    BBox,
    GeoJSONObject,
    GeoJSONObjectType,
    json_type_name,
    read_type,
    to_json_builtins,
)

__all__ = (
    "Position",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    "Geometry",
    "GEOMETRY_TYPES",
    "decode_geometry",
    "encode_geometry",
)


def __dir__():
    return __all__


# A longitude, latitude pair with an optional altitude.
Position = Annotated[Tuple[float, ...], msgspec.Meta(min_length=2, max_length=3)]


class Point(GeoJSONObject, tag=True):
    _geojson_type: ClassVar = GeoJSONObjectType.POINT

    coordinates: Position


class MultiPoint(GeoJSONObject, tag=True):
    _geojson_type: ClassVar = GeoJSONObjectType.MULTI_POINT

    coordinates: Tuple[Position, ...]


class LineString(GeoJSONObject, tag=True):
    _geojson_type: ClassVar = GeoJSONObjectType.LINE_STRING

    coordinates: Tuple[Position, ...]


class MultiLineString(GeoJSONObject, tag=True):
    _geojson_type: ClassVar = GeoJSONObjectType.MULTI_LINE_STRING

    coordinates: Tuple[Tuple[Position, ...], ...]


class Polygon(GeoJSONObject, tag=True):
    _geojson_type: ClassVar = GeoJSONObjectType.POLYGON

    coordinates: Tuple[Tuple[Position, ...], ...]


class MultiPolygon(GeoJSONObject, tag=True):
    _geojson_type: ClassVar = GeoJSONObjectType.MULTI_POLYGON

    coordinates: Tuple[Tuple[Tuple[Position, ...], ...], ...]


class GeometryCollection(GeoJSONObject, tag=True):
    _geojson_type: ClassVar = GeoJSONObjectType.GEOMETRY_COLLECTION

    geometries: "Tuple[Geometry, ...]"


Geometry = Union[
    Point,
    MultiPoint,
    LineString,
    MultiLineString,
    Polygon,
    MultiPolygon,
    GeometryCollection,
]

GEOMETRY_TYPES: Dict[GeoJSONObjectType, Type[GeoJSONObject]] = {
    cls._geojson_type: cls
    for cls in (
        Point,
        MultiPoint,
        LineString,
        MultiLineString,
        Polygon,
        MultiPolygon,
        GeometryCollection,
    )
}


def decode_geometry(node: Any, path: str = "$") -> Geometry:
    """Decode a JSON node into one of the geometry variants.

    Parameters
    ----------
    node : dict
        A decoded JSON object.
    path : str, optional
        The JSON path of ``node``, used in error messages.

    Returns
    -------
    geometry : Geometry
        An instance of the variant named by the node's ``"type"`` member.

    Raises
    ------
    MissingDiscriminator, UnknownType
        If the ``"type"`` member is missing or invalid.
    TypeMismatch
        If ``node`` is a Feature or FeatureCollection.
    GeometryDecodeError
        If the remaining members don't match the variant.
    """
    kind = read_type(node, path=path)
    cls = GEOMETRY_TYPES.get(kind)
    if cls is None:
        raise TypeMismatch("Geometry", kind.value, path=f"{path}.type")

    if cls is GeometryCollection:
        return _decode_collection(node, path)

    msg = {"type": kind.value, "coordinates": node.get("coordinates")}
    if node.get("bbox") is not None:
        msg["bbox"] = node["bbox"]
    try:
        return msgspec.convert(msg, cls)
    except msgspec.ValidationError as exc:
        raise _relocated(exc, path) from exc


def _decode_collection(node: dict, path: str) -> GeometryCollection:
    members = node.get("geometries")
    if not isinstance(members, list):
        raise GeometryDecodeError(
            f"Expected `array`, got `{json_type_name(members)}`",
            path=f"{path}.geometries",
        )
    geometries = tuple(
        decode_geometry(member, f"{path}.geometries[{i}]")
        for i, member in enumerate(members)
    )
    bbox = node.get("bbox")
    if bbox is not None:
        try:
            bbox = msgspec.convert(bbox, BBox)
        except msgspec.ValidationError as exc:
            raise _relocated(exc, f"{path}.bbox") from exc
    return GeometryCollection(geometries, bbox=bbox)


def _relocated(exc: msgspec.ValidationError, path: str) -> GeometryDecodeError:
    message, location = split_location(exc)
    return GeometryDecodeError(message, path=path + location[1:])


def encode_geometry(geometry: GeoJSONObject) -> Dict[str, Any]:
    """Encode a geometry as a JSON-compatible dict."""
    return to_json_builtins(geometry)
