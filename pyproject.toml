[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "agora"
version = "0.1.0"
description = "User domain, role- and attribute-based guards, and repositories for a community message board backend."
requires-python = ">=3.10"
keywords = [
    "message-board",
    "forum",
    "rbac",
    "abac",
    "jwt",
    "mongodb",
    "cqrs",
    "domain-driven-design",
]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content :: Message Boards",
    "Typing :: Typed",
]
dependencies = [
    "pyjwt",
    "python-dotenv",
    "pymongo",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["agora"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
