[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "resound"
version = "0.2.2"
description = "Read and write Wwise sound bank (BNK) and package (PCK) files"
requires-python = ">=3.10"
dependencies = []
keywords = ["wwise", "bnk", "pck", "soundbank", "audio", "wem"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["resound"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
