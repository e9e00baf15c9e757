[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "derasn"
version = "0.1.0"
description = "Parse and encode ASN.1 objects in BER and DER, with a DER dump tool"
requires-python = ">=3.10"
keywords = ["asn1", "ber", "der", "x690", "oid", "parser", "encoder"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Topic :: File Formats",
]
dependencies = [
    "termcolor",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
derasn-dump = "derasn.dump:main"

[tool.hatch.build.targets.wheel]
packages = ["derasn"]

[tool.pytest.ini_options]
addopts = "-ra"
