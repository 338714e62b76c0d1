[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "divquant"
version = "0.1.0"
description = "Divisive hierarchical color quantization and cluster visualisation for PNG images"
requires-python = ">=3.10"
keywords = ["color quantization", "palette", "clustering", "png", "image"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
divquant = "divquant.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["divquant"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
