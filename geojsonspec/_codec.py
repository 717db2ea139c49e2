import logging
from typing import Any, Callable, Dict, Optional, Tuple, Type, Union

import msgspec
from msgspec import inspect as mi

from ._utils import get_origin_class, get_type_params
from .errors import (
    FeatureDecodeError,
    GeoJSONDecodeError,
    MissingFeatures,
    MissingProperties,
    NestedGeometryError,
    PropertiesDecodeError,
    TypeMismatch,
    split_location,
)
from .feature import AnyFeature, Feature, FeatureCollection, Properties, TypedFeature
from .geometry import (
    GEOMETRY_TYPES,
    Geometry,
    decode_geometry,
    encode_geometry,
)
from .objects import (
    BBox,
    GeoJSONObject,
    GeoJSONObjectType,
    expect_array,
    read_type,
    to_json_builtins,
)

__all__ = (
    "GeoJSON",
    "decode_feature",
    "encode_feature",
    "decode_feature_collection",
    "encode_feature_collection",
    "convert",
    "to_builtins",
)

logger = logging.getLogger(__name__)

GeoJSON = Union[Geometry, Feature, FeatureCollection]

DecHook = Optional[Callable[[Type, Any], Any]]
EncHook = Optional[Callable[[Any], Any]]

_GEOMETRY_CLASSES = tuple(GEOMETRY_TYPES.values())

# Spellings of the open string-to-value mapping that select loose features.
_LOOSE_PROPERTIES = (
    dict,
    Dict,
    Dict[str, Any],
    dict[str, Any],
    Properties,
)


def is_loose_properties(properties_type: Any) -> bool:
    """Whether ``properties_type`` selects loose features."""
    return any(properties_type == t for t in _LOOSE_PROPERTIES)


def _geometry_classes(geometry_type: Any) -> Tuple[type, ...]:
    if geometry_type is Any or geometry_type == Geometry:
        return _GEOMETRY_CLASSES
    if getattr(geometry_type, "__origin__", None) is Union:
        members = geometry_type.__args__
    else:
        members = (geometry_type,)
    out = []
    for member in members:
        if member in _GEOMETRY_CLASSES:
            out.append(member)
        elif member is not type(None):
            raise TypeError(f"Type '{member!r}' is not a GeoJSON geometry type")
    return tuple(out)


def _join(path: str, subpath: str) -> str:
    return path + subpath[1:]


def _variant_mismatch(geometry, allowed: Tuple[type, ...], path: str) -> TypeMismatch:
    expected = " | ".join(c.__name__ for c in allowed)
    return TypeMismatch(expected, geometry.type.value, path=f"{path}.type")


###############################################################################
# Feature                                                                     #
###############################################################################


def _decode_geometry_member(node: dict, allowed: Tuple[type, ...], path: str):
    geometry_node = node.get("geometry")
    if geometry_node is None:
        return None
    path = f"{path}.geometry"
    try:
        geometry = decode_geometry(geometry_node, path)
    except GeoJSONDecodeError as exc:
        raise NestedGeometryError(exc) from exc
    if not isinstance(geometry, allowed):
        exc = _variant_mismatch(geometry, allowed, path)
        raise NestedGeometryError(exc) from exc
    return geometry


def _decode_id(node: dict, path: str) -> Optional[str]:
    value = node.get("id")
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise GeoJSONDecodeError(
        f"Expected `str | int | null`, got `{type(value).__name__}`",
        path=f"{path}.id",
    )


def _empty_properties(properties_type: Any, loose: bool, path: str) -> Any:
    if loose:
        return {}
    info = mi.type_info(properties_type)
    if isinstance(info, (mi.AnyType, mi.NoneType)) or (
        isinstance(info, mi.UnionType) and info.includes_none
    ):
        return None
    try:
        return msgspec.convert({}, properties_type)
    except msgspec.ValidationError:
        raise MissingProperties(properties_type, path=path) from None


def _decode_properties(
    node: dict,
    properties_type: Any,
    loose: bool,
    strict: bool,
    dec_hook: DecHook,
    path: str,
) -> Any:
    path = f"{path}.properties"
    value = node.get("properties")
    if value is None:
        return _empty_properties(properties_type, loose, path)
    try:
        return msgspec.convert(
            value, properties_type, strict=strict, dec_hook=dec_hook
        )
    except msgspec.ValidationError as exc:
        raise PropertiesDecodeError(
            exc, path=_join(path, split_location(exc)[1])
        ) from exc


def decode_feature(
    node: Any,
    properties_type: Any = Properties,
    *,
    geometry_type: Any = Geometry,
    feature_class: Optional[type] = None,
    strict: bool = True,
    dec_hook: DecHook = None,
    path: str = "$",
) -> AnyFeature:
    """Decode a JSON node into a Feature.

    Parameters
    ----------
    node : dict
        A decoded JSON object with ``"type": "Feature"``.
    properties_type : type, optional
        The type to convert ``"properties"`` into. The default, an open
        ``dict[str, Any]``, produces a loose `Feature`. Any other type
        produces a `TypedFeature`.
    geometry_type : type, optional
        The geometry variant (or union of variants) allowed. Defaults to any
        geometry. Geometries of another variant are an error, never coerced.
    feature_class : type, optional
        The class to instantiate. Defaults to `Feature` or `TypedFeature`
        depending on ``properties_type``.
    strict : bool, optional
        Whether properties are converted in strict mode, see `msgspec.convert`.
    dec_hook : callable, optional
        A hook for converting custom properties types, see `msgspec.convert`.
    path : str, optional
        The JSON path of ``node``, used in error messages.

    Returns
    -------
    feature : Feature or TypedFeature

    Raises
    ------
    MissingDiscriminator, UnknownType, TypeMismatch
        If ``node`` isn't tagged as a Feature.
    NestedGeometryError
        If the geometry fails to decode, or is of a disallowed variant.
    MissingProperties
        If ``"properties"`` is null and ``properties_type`` has no empty value.
    PropertiesDecodeError
        If ``"properties"`` can't be converted to ``properties_type``.
    """
    loose = is_loose_properties(properties_type)
    if feature_class is None:
        feature_class = Feature if loose else TypedFeature

    read_type(node, GeoJSONObjectType.FEATURE, path)
    geometry = _decode_geometry_member(node, _geometry_classes(geometry_type), path)
    id = _decode_id(node, path)
    properties = _decode_properties(
        node, properties_type, loose, strict, dec_hook, path
    )
    return feature_class(geometry, properties, id, bbox=_decode_bbox(node, path))


def _decode_bbox(node: dict, path: str):
    bbox = node.get("bbox")
    if bbox is None:
        return None
    try:
        return msgspec.convert(bbox, BBox)
    except msgspec.ValidationError as exc:
        message, location = split_location(exc)
        raise GeoJSONDecodeError(message, path=_join(f"{path}.bbox", location)) from exc


def _encode_envelope(obj: GeoJSONObject) -> Dict[str, Any]:
    out = {"type": obj.type.value}
    if obj.bbox is not None:
        out["bbox"] = list(obj.bbox)
    return out


def encode_feature(feature: AnyFeature, *, enc_hook: EncHook = None) -> Dict[str, Any]:
    """Encode a Feature as a JSON-compatible dict.

    ``"id"`` is only written if set, ``"geometry"`` and ``"properties"`` are
    always written, as ``null`` if they're ``None``.
    """
    out = _encode_envelope(feature)
    if feature.id is not None:
        out["id"] = feature.id
    out["geometry"] = (
        None if feature.geometry is None else encode_geometry(feature.geometry)
    )
    out["properties"] = to_json_builtins(feature.properties, enc_hook=enc_hook)
    return out


###############################################################################
# FeatureCollection                                                           #
###############################################################################


def decode_feature_collection(
    node: Any,
    properties_type: Any = Properties,
    *,
    collection_class: type = FeatureCollection,
    strict: bool = True,
    dec_hook: DecHook = None,
    path: str = "$",
) -> FeatureCollection:
    """Decode a JSON node into a FeatureCollection.

    Every element of ``"features"`` is decoded with `decode_feature` using
    the same ``properties_type``. Decoding stops at the first invalid
    element, no partial collection is returned.

    Raises
    ------
    MissingDiscriminator, UnknownType, TypeMismatch
        If ``node`` isn't tagged as a FeatureCollection.
    MissingFeatures
        If ``node`` has no ``"features"`` member.
    FeatureDecodeError
        If an element fails to decode. The element's position is available
        as ``index``, the original error as ``error``.
    """
    read_type(node, GeoJSONObjectType.FEATURE_COLLECTION, path)
    if "features" not in node:
        raise MissingFeatures(path=path)
    members = expect_array(node["features"], f"{path}.features")

    features = []
    for i, member in enumerate(members):
        try:
            feature = decode_feature(
                member,
                properties_type,
                strict=strict,
                dec_hook=dec_hook,
                path=f"{path}.features[{i}]",
            )
        except GeoJSONDecodeError as exc:
            logger.debug("Failed to decode feature %d: %s", i, exc)
            raise FeatureDecodeError(i, exc) from exc
        features.append(feature)
    return collection_class(tuple(features), bbox=_decode_bbox(node, path))


def encode_feature_collection(
    collection: FeatureCollection, *, enc_hook: EncHook = None
) -> Dict[str, Any]:
    """Encode a FeatureCollection as a JSON-compatible dict."""
    out = _encode_envelope(collection)
    out["features"] = [
        encode_feature(f, enc_hook=enc_hook) for f in collection.features
    ]
    return out


###############################################################################
# Dispatch                                                                    #
###############################################################################


class _Plan(msgspec.Struct, frozen=True):
    """How to decode a requested type, resolved once per type."""

    kind: str  # one of "any", "geometry", "feature", "collection"
    cls: Optional[type] = None
    properties_type: Any = Properties
    geometry_type: Any = Geometry


_PLANS: Dict[Any, _Plan] = {}


def _is_geometry_union(type: Any) -> bool:
    return getattr(type, "__origin__", None) is Union and all(
        t in _GEOMETRY_CLASSES for t in type.__args__
    )


def _make_plan(type: Any) -> _Plan:
    if type is Any or type == GeoJSON:
        return _Plan("any")
    if type == Geometry or type in _GEOMETRY_CLASSES or _is_geometry_union(type):
        return _Plan("geometry", geometry_type=type)

    origin = get_origin_class(type)
    if origin is not None and issubclass(origin, FeatureCollection):
        cls, (properties_type,) = get_type_params(
            type, FeatureCollection, (Properties,)
        )
        return _Plan("collection", cls, properties_type=properties_type)
    if origin is not None and issubclass(origin, TypedFeature):
        cls, (geometry_type, properties_type) = get_type_params(
            type, TypedFeature, (Geometry, Any)
        )
        _geometry_classes(geometry_type)  # reject non-geometry parameters early
        if cls is TypedFeature and is_loose_properties(properties_type):
            cls = Feature
        return _Plan("feature", cls, properties_type, geometry_type)
    if origin is not None and issubclass(origin, Feature):
        cls, (geometry_type,) = get_type_params(type, Feature, (Geometry,))
        _geometry_classes(geometry_type)  # reject non-geometry parameters early
        return _Plan("feature", cls, Properties, geometry_type)

    raise TypeError(f"Type '{type!r}' is not a supported GeoJSON type")


def _get_plan(type: Any) -> _Plan:
    try:
        return _PLANS[type]
    except KeyError:
        out = _PLANS[type] = _make_plan(type)
        return out
    except TypeError:
        # unhashable annotations are resolved each time
        return _make_plan(type)


def convert(
    node: Any,
    type: Any = GeoJSON,
    *,
    strict: bool = True,
    dec_hook: DecHook = None,
) -> Any:
    """Convert a decoded JSON node into a GeoJSON object.

    Parameters
    ----------
    node : dict
        A JSON object, as produced by ``msgspec.json.decode`` or
        ``json.loads``.
    type : type, optional
        The GeoJSON type to decode. May be a geometry class or the `Geometry`
        union, `Feature` (optionally parametrized by a geometry type),
        `TypedFeature` (parametrized by geometry and properties types) or a
        subclass, or `FeatureCollection` (optionally parametrized by a
        properties type). The default `GeoJSON` accepts any of the nine
        GeoJSON types, decoding features with loose properties.
    strict : bool, optional
        Whether properties are converted in strict mode, see `msgspec.convert`.
    dec_hook : callable, optional
        A hook for converting custom properties types, see `msgspec.convert`.

    Returns
    -------
    obj : Any
        The decoded object.

    Raises
    ------
    GeoJSONDecodeError
        Or one of its subclasses, if ``node`` isn't valid for ``type``.
    """
    plan = _get_plan(type)
    kind = plan.kind
    if kind == "any":
        tag = read_type(node)
        if tag.is_geometry:
            return decode_geometry(node)
        kind = "feature" if tag is GeoJSONObjectType.FEATURE else "collection"

    if kind == "geometry":
        geometry = decode_geometry(node)
        allowed = _geometry_classes(plan.geometry_type)
        if not isinstance(geometry, allowed):
            raise _variant_mismatch(geometry, allowed, "$")
        return geometry
    if kind == "feature":
        return decode_feature(
            node,
            plan.properties_type,
            geometry_type=plan.geometry_type,
            feature_class=plan.cls,
            strict=strict,
            dec_hook=dec_hook,
        )
    return decode_feature_collection(
        node,
        plan.properties_type,
        collection_class=plan.cls or FeatureCollection,
        strict=strict,
        dec_hook=dec_hook,
    )


def to_builtins(obj: GeoJSONObject, *, enc_hook: EncHook = None) -> Dict[str, Any]:
    """Encode any GeoJSON object as a JSON-compatible dict.

    Parameters
    ----------
    obj : GeoJSONObject
        A geometry, feature, or feature collection.
    enc_hook : callable, optional
        A callable to call for properties values that aren't supported msgspec
        types. Takes the unsupported object and should return a supported
        object, or raise a ``NotImplementedError``.

    Returns
    -------
    node : dict
    """
    if isinstance(obj, (Feature, TypedFeature)):
        return encode_feature(obj, enc_hook=enc_hook)
    if isinstance(obj, FeatureCollection):
        return encode_feature_collection(obj, enc_hook=enc_hook)
    if isinstance(obj, _GEOMETRY_CLASSES):
        return encode_geometry(obj)
    raise TypeError(f"Expected a GeoJSON object, got {type(obj).__name__!r}")
