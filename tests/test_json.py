import datetime

import msgspec
import pytest

import geojsonspec
from geojsonspec import Feature, FeatureCollection, Point, Polygon, TypedFeature

from utils import Park, Props, loose


def test_module_dir():
    assert set(dir(geojsonspec.json)) == {"Encoder", "Decoder", "encode", "decode"}


class TestEncoder:
    def test_encode(self):
        enc = geojsonspec.json.Encoder()
        msg = enc.encode(Point((1.0, 2.0)))
        assert msgspec.json.decode(msg) == {"type": "Point", "coordinates": [1.0, 2.0]}

    def test_encode_feature(self):
        msg = geojsonspec.json.encode(Feature(None, {"a": 1}, "x"))
        assert msgspec.json.decode(msg) == {
            "type": "Feature",
            "id": "x",
            "geometry": None,
            "properties": {"a": 1},
        }

    def test_enc_hook(self):
        f = Feature(None, {"when": datetime.date(2020, 1, 2)})

        class Custom:
            pass

        f2 = Feature(None, {"x": Custom()})
        with pytest.raises(TypeError):
            geojsonspec.json.encode(f2)

        enc = geojsonspec.json.Encoder(enc_hook=lambda obj: "custom")
        assert msgspec.json.decode(enc.encode(f2))["properties"] == {"x": "custom"}
        # Natively supported values never reach the hook
        assert b'"2020-01-02"' in enc.encode(f)

    def test_encode_invalid(self):
        with pytest.raises(TypeError):
            geojsonspec.json.encode({"type": "Point", "coordinates": [0, 0]})


class TestDecoder:
    def test_defaults(self):
        dec = geojsonspec.json.Decoder()
        assert dec.type is geojsonspec.GeoJSON
        assert dec.strict is True
        assert dec.dec_hook is None
        assert repr(dec).startswith("Decoder(")

    def test_any(self):
        dec = geojsonspec.json.Decoder()
        assert dec.decode(b'{"type": "Point", "coordinates": [1, 2]}') == Point(
            (1.0, 2.0)
        )
        res = dec.decode('{"type": "FeatureCollection", "features": []}')
        assert type(res) is FeatureCollection

    def test_typed(self):
        dec = geojsonspec.json.Decoder(TypedFeature[Point, Props])
        res = dec.decode(
            b'{"type": "Feature", "geometry": {"type": "Point", "coordinates": [0, 0]},'
            b' "properties": {"name": "x"}}'
        )
        assert res == TypedFeature(Point((0.0, 0.0)), Props("x"))

    def test_subclass(self):
        buf = geojsonspec.json.encode(
            Park(Polygon((((0.0, 0.0), (1.0, 0.0), (0.0, 0.0)),)), Props("p"))
        )
        res = geojsonspec.json.decode(buf, type=Park)
        assert type(res) is Park
        assert res.properties == Props("p")

    @pytest.mark.parametrize("type", [int, dict, Props])
    def test_unsupported_type(self, type):
        with pytest.raises(TypeError):
            geojsonspec.json.Decoder(type)

    def test_malformed_json(self):
        dec = geojsonspec.json.Decoder()
        with pytest.raises(msgspec.DecodeError):
            dec.decode(b'{"type": "Point",')

    def test_invalid_geojson(self):
        dec = geojsonspec.json.Decoder(Feature)
        with pytest.raises(geojsonspec.MissingDiscriminator):
            dec.decode(b'{"geometry": null}')

    def test_errors_are_validation_errors(self):
        with pytest.raises(msgspec.ValidationError):
            geojsonspec.json.decode(b'{"type": "Circle"}')

    def test_strict(self):
        buf = (
            b'{"type": "Feature", "geometry": null,'
            b' "properties": {"name": "a", "population": "10"}}'
        )
        with pytest.raises(geojsonspec.PropertiesDecodeError):
            geojsonspec.json.decode(buf, type=TypedFeature[Point, Props])
        res = geojsonspec.json.decode(
            buf, type=TypedFeature[Point, Props], strict=False
        )
        assert res.properties == Props("a", 10)

    def test_dec_hook(self):
        class Name:
            def __init__(self, value):
                self.value = value

        class Custom(msgspec.Struct):
            name: Name

        def dec_hook(type, obj):
            if type is Name:
                return Name(obj)
            raise NotImplementedError

        buf = b'{"type": "Feature", "geometry": null, "properties": {"name": "a"}}'
        dec = geojsonspec.json.Decoder(TypedFeature[Point, Custom], dec_hook=dec_hook)
        res = dec.decode(buf)
        assert type(res.properties.name) is Name
        assert res.properties.name.value == "a"


class TestRoundtrip:
    def test_feature_collection(self):
        c = FeatureCollection.create(
            loose(0, 0, {"a": 1}, id="1"),
            Feature(Polygon((((0.0, 0.0), (1.0, 0.0), (0.0, 0.0)),))),
            bbox=(0.0, 0.0, 1.0, 1.0),
        )
        res = geojsonspec.json.decode(geojsonspec.json.encode(c))
        assert res == c
        assert res.features[0].properties == {"a": 1}
        assert res.features[0].id == "1"

    def test_typed_feature_collection(self):
        c = FeatureCollection.create(
            TypedFeature(Point((0.0, 0.0)), Props("a", 1), "1"),
            TypedFeature(None, Props("b")),
        )
        buf = geojsonspec.json.encode(c)
        assert geojsonspec.json.decode(buf, type=FeatureCollection[Props]) == c
