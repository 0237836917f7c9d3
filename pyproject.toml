[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "somosdev"
version = "0.1.0"
description = "A small community message board that lists posts from an SQLite database as server-rendered HTML."
requires-python = ">=3.10"
keywords = ["message board", "posts", "wsgi", "sqlite", "community"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Message Boards",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
]
dependencies = [
    "werkzeug",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
somosdev = "somosdev.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["somosdev"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
