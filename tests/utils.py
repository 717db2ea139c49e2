from typing import Optional

import msgspec

from geojsonspec import Feature, Point, Polygon, TypedFeature


class Props(msgspec.Struct, frozen=True):
    name: str
    population: int = 0


class DefaultProps(msgspec.Struct, frozen=True):
    name: str = "unnamed"


class Park(TypedFeature[Polygon, Props]):
    pass


SQUARE = ((0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0))


def loose(x: float, y: float, properties: Optional[dict] = None, id=None):
    return Feature.create(Point((x, y)), properties, id)
