[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pathtracer"
version = "0.1.0"
description = "A physically based path tracer for OBJ scenes with JSON material descriptions"
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = [
    "path tracing",
    "ray tracing",
    "rendering",
    "global illumination",
    "brdf",
    "microfacet",
    "ggx",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pathtracer = "pathtracer.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pathtracer"]

[tool.hatch.build.targets.sdist]
include = [
    "pathtracer",
    "tests",
    "pyproject.toml",
]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
