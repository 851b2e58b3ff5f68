[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dualink"
version = "0.10.0"
description = "Building blocks of a software KVM: pointer motion coalescing, modifier-aware key remapping, configuration, certificate fingerprints and background DNS resolution."
requires-python = ">=3.11"
keywords = ["kvm", "keyboard", "mouse", "remap", "input", "coalescing", "configuration"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Utilities",
    "Typing :: Typed",
]
dependencies = [
    "cryptography",
    "dnspython",
    "tomli-w",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["dualink"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
