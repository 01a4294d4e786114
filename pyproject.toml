[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "unetkit"
version = "0.1.0"
description = "Pure-Python building blocks for overlay networking: SHA-512, SipHash, STUN and the sntrup761 KEM"
requires-python = ">=3.10"
dependencies = []
keywords = ["sha512", "hmac", "siphash", "stun", "sntrup761", "kem", "post-quantum"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["unetkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
