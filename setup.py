"""
Setup script for tiny-sketch.
"""

from setuptools import setup, find_packages

setup(
    name="tiny-sketch",
    version="0.1.0",
    description="Bloom filter and Count-Min Sketch for data streams",
    packages=find_packages(include=["tiny_sketch", "tiny_sketch.*"]),
    package_data={"tiny_sketch": ["py.typed"]},
    python_requires=">=3.8",
)
