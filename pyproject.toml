[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "personapi"
version = "1.0.0"
description = "REST API for managing people, enriched with gender and nationality guesses"
requires-python = ">=3.10"
keywords = ["rest", "api", "flask", "sqlalchemy", "people", "crud"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Flask",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
]
dependencies = [
    "flask",
    "sqlalchemy",
    "requests",
    "python-dotenv",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
personapi = "personapi.app:main"

[tool.hatch.build.targets.wheel]
packages = ["personapi"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
