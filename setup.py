"""
Setup script for the Multiset Hash package.
"""

from pathlib import Path

from setuptools import setup, find_packages

here = Path(__file__).parent


def read_requirements(name):
    with open(here / name, "r") as f:
        return [
            line.strip() for line in f if line.strip() and not line.startswith("#")
        ]


setup(
    name="multiset-hash",
    version="0.1.0",
    description="Commutative incremental hashing of multisets over ristretto255",
    packages=find_packages(include=["multiset_hash", "multiset_hash.*"]),
    python_requires=">=3.8",
    install_requires=read_requirements("requirements.txt"),
    extras_require={
        "dev": read_requirements("requirements-dev.txt"),
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Topic :: Security :: Cryptography",
    ],
)
