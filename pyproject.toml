[build-system]
requires = ["setuptools>=61"]
build-backend = "setuptools.build_meta"

[project]
name = "wizweb"
version = "2.0.0"
description = "A small HTTP server for in-memory web pages, CGI endpoints and a CAN bridge configuration page"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "cgi", "can", "web-config"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
wizweb = "wizweb.app:main"

[tool.setuptools.packages.find]
include = ["wizweb*"]

[tool.pytest.ini_options]
addopts = "-ra"
