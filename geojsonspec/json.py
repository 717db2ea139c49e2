from typing import Any, Callable, Generic, Optional, Type, TypeVar, Union

import msgspec

from ._codec import (
    GeoJSON,
    _get_plan,
    convert as _convert,
    to_builtins as _to_builtins,
)

__all__ = ("Encoder", "Decoder", "encode", "decode")


def __dir__():
    return __all__


T = TypeVar("T")


class Encoder:
    """A GeoJSON encoder.

    Parameters
    ----------
    enc_hook : callable, optional
        A callable to call for properties values that aren't supported msgspec
        types. Takes the unsupported object and should return a supported
        object, or raise a ``NotImplementedError``.
    """

    def __init__(self, *, enc_hook: Optional[Callable[[Any], Any]] = None):
        self.enc_hook = enc_hook
        self._encoder = msgspec.json.Encoder()

    def encode(self, obj: Any) -> bytes:
        """Serialize a geometry, feature, or feature collection to JSON."""
        return self._encoder.encode(_to_builtins(obj, enc_hook=self.enc_hook))


class Decoder(Generic[T]):
    """A GeoJSON decoder.

    Parameters
    ----------
    type : type, optional
        The GeoJSON type to decode, see `geojsonspec.convert` for the types
        accepted. Defaults to any GeoJSON object.
    strict : bool, optional
        Whether properties are converted in strict mode. Defaults to True.
    dec_hook : callable, optional
        An optional callback for decoding custom properties types. Should
        have the signature ``dec_hook(type: Type, obj: Any) -> Any``.
    """

    def __init__(
        self,
        type: Type[T] = GeoJSON,
        *,
        strict: bool = True,
        dec_hook: Optional[Callable[[Type, Any], Any]] = None,
    ):
        # Fail on unsupported types now, rather than on first use
        _get_plan(type)
        self.type = type
        self.strict = strict
        self.dec_hook = dec_hook

    def __repr__(self):
        return f"Decoder({self.type!r})"

    def decode(self, buf: Union[bytes, str]) -> T:
        """Deserialize a GeoJSON object from JSON.

        Raises
        ------
        msgspec.DecodeError
            If ``buf`` isn't valid JSON.
        GeoJSONDecodeError
            If the JSON isn't a valid instance of the decoder's type.
        """
        node = msgspec.json.decode(buf)
        return _convert(node, self.type, strict=self.strict, dec_hook=self.dec_hook)


_default_encoder = Encoder()


def encode(obj: Any, *, enc_hook: Optional[Callable[[Any], Any]] = None) -> bytes:
    """Serialize a geometry, feature, or feature collection to JSON.

    See Also
    --------
    Encoder.encode
    """
    if enc_hook is None:
        return _default_encoder.encode(obj)
    return Encoder(enc_hook=enc_hook).encode(obj)


def decode(
    buf: Union[bytes, str],
    *,
    type: Type[T] = GeoJSON,
    strict: bool = True,
    dec_hook: Optional[Callable[[Type, Any], Any]] = None,
) -> T:
    """Deserialize a GeoJSON object from JSON.

    Parameters
    ----------
    buf : bytes or str
        The message to decode.
    type : type, optional
        The GeoJSON type to decode, defaults to any GeoJSON object.
    strict : bool, optional
        Whether properties are converted in strict mode. Defaults to True.
    dec_hook : callable, optional
        An optional callback for decoding custom properties types.

    See Also
    --------
    Decoder.decode
    """
    return Decoder(type, strict=strict, dec_hook=dec_hook).decode(buf)
