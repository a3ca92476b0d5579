"""Package configuration."""

from setuptools import find_packages, setup


def _readme():
    with open("README.md") as f:
        return f.read()


setup(
    name="barotropicmodel",
    version="0.1",
    description="Energy conserving barotropic shallow water model on the sphere",
    long_description=_readme(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Programming Language :: Python :: 3.9",
        "Topic :: Scientific/Engineering :: Atmospheric Science",
    ],
    packages=find_packages(include=["barotropicmodel", "barotropicmodel.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numba >= 0.50.1",
        "numpy",
        "xarray",
        "netCDF4",
        "loguru",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
