"""Errors raised while decoding GeoJSON.

Every error derives from `GeoJSONDecodeError`, a `msgspec.ValidationError`
subclass, so code already handling msgspec validation failures handles these
too. Messages follow msgspec's ``"<message> - at `<path>`"`` format.
"""

from typing import Any, Optional, Tuple

import msgspec

__all__ = (
    "GeoJSONDecodeError",
    "MissingDiscriminator",
    "UnknownType",
    "TypeMismatch",
    "MissingFeatures",
    "MissingProperties",
    "GeometryDecodeError",
    "NestedGeometryError",
    "PropertiesDecodeError",
    "FeatureDecodeError",
)


def __dir__():
    return __all__


class GeoJSONDecodeError(msgspec.ValidationError):
    """Base class for GeoJSON decoding errors.

    Parameters
    ----------
    message : str
        A description of the failure, without location.
    path : str, optional
        The JSON path of the offending node. Defaults to the document root.
    """

    def __init__(self, message: str, path: str = "$"):
        self.message = message
        self.path = path
        super().__init__(f"{message} - at `{path}`")


class MissingDiscriminator(GeoJSONDecodeError):
    """The object has no ``"type"`` member."""

    def __init__(self, path: str = "$"):
        super().__init__('Object missing required field `type`', path=path)


class UnknownType(GeoJSONDecodeError):
    """The ``"type"`` member isn't one of the GeoJSON types."""

    def __init__(self, value: Any, path: str = "$"):
        self.value = value
        super().__init__(f"Invalid GeoJSON type {value!r}", path=path)


class TypeMismatch(GeoJSONDecodeError):
    """The ``"type"`` member is valid, but not what this decoder expects."""

    def __init__(self, expected: str, got: str, path: str = "$"):
        self.expected = expected
        self.got = got
        super().__init__(f"Expected `{expected}`, got `{got}`", path=path)


class MissingFeatures(GeoJSONDecodeError):
    """A FeatureCollection has no ``"features"`` member."""

    def __init__(self, path: str = "$"):
        super().__init__("Object missing required field `features`", path=path)


class MissingProperties(GeoJSONDecodeError):
    """``"properties"`` is null, and the requested type has no empty value."""

    def __init__(self, properties_type: Any, path: str = "$"):
        self.properties_type = properties_type
        super().__init__(
            f"Properties are null, and `{_type_repr(properties_type)}` "
            "has no empty value",
            path=path,
        )


class GeometryDecodeError(GeoJSONDecodeError):
    """A geometry's members don't match its declared variant."""


class _WrappingError(GeoJSONDecodeError):
    _description: str

    def __init__(self, error: Exception, path: Optional[str] = None):
        self.error = error
        inner, error_path = split_location(error)
        if path is None:
            path = error_path
        super().__init__(f"{self._description}: {inner}", path=path)


class NestedGeometryError(_WrappingError):
    """Wraps a failure raised while decoding a Feature's geometry.

    The original error is available as ``error`` (and ``__cause__``).
    """

    _description = "Invalid geometry"


class PropertiesDecodeError(_WrappingError):
    """Wraps a failure converting ``"properties"`` to the requested type.

    The original `msgspec.ValidationError` is available as ``error`` (and
    ``__cause__``).
    """

    _description = "Invalid properties"


class FeatureDecodeError(_WrappingError):
    """Wraps a failure decoding one element of a FeatureCollection.

    Parameters
    ----------
    index : int
        The position of the failing element in the ``"features"`` array.
    error : Exception
        The underlying decoding error.
    """

    _description = "Invalid feature"

    def __init__(self, index: int, error: Exception, path: Optional[str] = None):
        self.index = index
        super().__init__(error, path=path)


def _type_repr(obj: Any) -> str:
    if isinstance(obj, type):
        return obj.__qualname__
    return repr(obj)


def split_location(error: Exception) -> Tuple[str, str]:
    """Split an error into its message and the JSON path it occurred at.

    Works both for errors defined here and for plain msgspec errors, whose
    location is only embedded in the message text.
    """
    if isinstance(error, GeoJSONDecodeError):
        return error.message, error.path
    text = str(error)
    message, sep, location = text.rpartition(" - at `")
    if sep and location.endswith("`"):
        return message, location[:-1]
    return text, "$"
