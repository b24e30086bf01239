[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tubekit"
version = "0.1.0"
description = "Stream-format selection, video metadata, comment threads and a subscription store for a small video client"
requires-python = ">=3.10"
dependencies = []
keywords = ["video", "streams", "channels", "subscriptions", "comments", "sqlite"]
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
    "Topic :: Internet :: WWW/HTTP",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tubekit"]

[tool.pytest.ini_options]
addopts = "-ra"
