[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "exposkit"
version = "0.1.0"
description = "Tools for the XFS disk image and parts of the XSM machine used by the eXpOS teaching operating system"
requires-python = ">=3.10"
dependencies = []
keywords = ["expos", "xsm", "xfs", "emulator", "operating-systems", "teaching", "disk-image"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Emulators",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xfs-interface = "exposkit.xfs.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["exposkit"]

[tool.hatch.build.targets.sdist]
include = ["exposkit", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
