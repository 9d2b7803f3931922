[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "liveshark"
version = "0.1.0"
description = "Art-Net and sACN DMX payload decoding, report model and PCAPNG fixture writer"
requires-python = ">=3.10"
dependencies = []
keywords = ["artnet", "sacn", "e131", "dmx", "pcapng", "show-control"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
liveshark-fixtures = "liveshark.fixtures:main"

[tool.hatch.build.targets.wheel]
packages = ["liveshark"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
