import os

from setuptools import setup

here = os.path.abspath(os.path.dirname(__file__))

version_ns = {}
with open(os.path.join(here, "geojsonspec", "_version.py")) as f:
    exec(f.read(), version_ns)

setup(
    name="geojsonspec",
    version=version_ns["__version__"],
    description="Typed GeoJSON (RFC 7946) objects and codec built on msgspec",
    license="BSD",
    packages=["geojsonspec"],
    package_data={"geojsonspec": ["py.typed"]},
    python_requires=">=3.9",
    install_requires=["msgspec>=0.18"],
    extras_require={"test": ["pytest"]},
)
