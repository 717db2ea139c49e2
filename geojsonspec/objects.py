import enum
from typing import Any, ClassVar, Optional, Tuple

import msgspec

from .errors import GeoJSONDecodeError, MissingDiscriminator, TypeMismatch, UnknownType

__all__ = (
    "GeoJSONObjectType",
    "GeoJSONObject",
    "BBox",
    "read_type",
    "expect_object",
    "expect_array",
    "json_type_name",
    "to_json_builtins",
)


def __dir__():
    return __all__


BBox = Tuple[float, ...]


class GeoJSONObjectType(enum.Enum):
    """The nine values of the GeoJSON ``"type"`` discriminator."""

    POINT = "Point"
    MULTI_POINT = "MultiPoint"
    LINE_STRING = "LineString"
    MULTI_LINE_STRING = "MultiLineString"
    POLYGON = "Polygon"
    MULTI_POLYGON = "MultiPolygon"
    GEOMETRY_COLLECTION = "GeometryCollection"
    FEATURE = "Feature"
    FEATURE_COLLECTION = "FeatureCollection"

    @classmethod
    def parse(cls, value: Any) -> "GeoJSONObjectType":
        """Parse a discriminator value, ignoring case.

        Raises
        ------
        ValueError
            If ``value`` isn't a string naming one of the GeoJSON types.
        """
        if isinstance(value, str):
            member = _BY_FOLDED_NAME.get(value.casefold())
            if member is not None:
                return member
        raise ValueError(f"{value!r} is not a valid GeoJSON type")

    @property
    def is_geometry(self) -> bool:
        return self not in (
            GeoJSONObjectType.FEATURE,
            GeoJSONObjectType.FEATURE_COLLECTION,
        )


_BY_FOLDED_NAME = {t.value.casefold(): t for t in GeoJSONObjectType}


class GeoJSONObject(
    msgspec.Struct, frozen=True, omit_defaults=True, kw_only=True, tag_field="type"
):
    """The envelope shared by every GeoJSON object.

    Concrete subclasses set both their msgspec ``tag`` and ``_geojson_type``
    to the same discriminator, so the ``"type"`` member is always consistent
    with the concrete class.

    Parameters
    ----------
    bbox: tuple of float, optional
        The bounding box of the object (RFC 7946 section 5), if any.
    """

    _geojson_type: ClassVar[GeoJSONObjectType]

    bbox: Optional[BBox] = None

    @property
    def type(self) -> GeoJSONObjectType:
        """The discriminator of this object."""
        return self._geojson_type

    def _envelope_hash(self) -> int:
        return hash((self._geojson_type.value, self.bbox))


def json_type_name(obj: Any) -> str:
    """The JSON name for the type of a decoded node."""
    if obj is None:
        return "null"
    if isinstance(obj, dict):
        return "object"
    if isinstance(obj, (list, tuple)):
        return "array"
    return type(obj).__name__


def expect_object(node: Any, path: str) -> dict:
    """Check that ``node`` is a JSON object, returning it."""
    if not isinstance(node, dict):
        raise GeoJSONDecodeError(
            f"Expected `object`, got `{json_type_name(node)}`", path=path
        )
    return node


def expect_array(node: Any, path: str) -> list:
    """Check that ``node`` is a JSON array, returning it."""
    if not isinstance(node, list):
        raise GeoJSONDecodeError(
            f"Expected `array`, got `{json_type_name(node)}`", path=path
        )
    return node


def _find_type_member(node: dict) -> Tuple[bool, Any]:
    if "type" in node:
        return True, node["type"]
    for key, value in node.items():
        if isinstance(key, str) and key.casefold() == "type":
            return True, value
    return False, None


def read_type(
    node: Any, expected: Optional[GeoJSONObjectType] = None, path: str = "$"
) -> GeoJSONObjectType:
    """Read the discriminator of a decoded JSON node.

    The ``"type"`` member name and its value are both matched ignoring case.

    Parameters
    ----------
    node : dict
        The JSON object to inspect.
    expected : GeoJSONObjectType, optional
        If provided, the discriminator must equal this value.
    path : str, optional
        The JSON path of ``node``, used in error messages.

    Returns
    -------
    type : GeoJSONObjectType
        The parsed discriminator.

    Raises
    ------
    MissingDiscriminator
        If there is no ``"type"`` member.
    UnknownType
        If the ``"type"`` value isn't a GeoJSON type.
    TypeMismatch
        If ``expected`` is set and the discriminator differs from it.
    """
    node = expect_object(node, path)
    found, raw = _find_type_member(node)
    if not found:
        raise MissingDiscriminator(path=path)
    try:
        kind = GeoJSONObjectType.parse(raw)
    except ValueError:
        raise UnknownType(raw, path=f"{path}.type") from None
    if expected is not None and kind is not expected:
        raise TypeMismatch(expected.value, kind.value, path=f"{path}.type")
    return kind


def to_json_builtins(obj: Any, enc_hook: Any = None) -> Any:
    """Like `msgspec.to_builtins`, but tuples are emitted as lists too."""
    return _as_lists(msgspec.to_builtins(obj, enc_hook=enc_hook))


def _as_lists(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _as_lists(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_as_lists(v) for v in obj]
    return obj
