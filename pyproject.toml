[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xosfs"
version = "2.0.0"
description = "Tools for the XFS teaching file system: disk image management and XSM machine building blocks"
requires-python = ">=3.10"
dependencies = []
keywords = ["filesystem", "disk-image", "education", "operating-systems", "xsm", "xfs"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xfs-interface = "xosfs.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["xosfs"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
