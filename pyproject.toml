[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "costidw"
version = "0.1.0"
description = "Cost-distance and inverse-distance-weighted biomass demand surfaces over friction rasters"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "gis",
    "raster",
    "geotiff",
    "cost-distance",
    "idw",
    "inverse-distance-weighting",
    "biomass",
    "accessibility",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: GIS",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
costidw = "costidw.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["costidw"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
