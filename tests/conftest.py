import pytest

from utils import SQUARE


@pytest.fixture
def point_node():
    return {"type": "Point", "coordinates": [1.0, 2.0]}


@pytest.fixture
def polygon_node():
    return {"type": "Polygon", "coordinates": [[list(p) for p in SQUARE]]}


@pytest.fixture
def feature_node(point_node):
    return {
        "type": "Feature",
        "id": "a",
        "geometry": point_node,
        "properties": {"name": "Brussels", "population": 1200000},
    }


@pytest.fixture
def collection_node(feature_node, polygon_node):
    second = {
        "type": "Feature",
        "geometry": polygon_node,
        "properties": {"name": "Square"},
    }
    return {"type": "FeatureCollection", "features": [feature_node, second]}
