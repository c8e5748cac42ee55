[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lessonbot"
version = "0.1.0"
description = "Telegram bot for publishing lesson slots and letting students book and cancel them"
requires-python = ">=3.10"
keywords = ["telegram", "bot", "scheduling", "lessons", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Natural Language :: Russian",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Communications :: Chat",
    "Topic :: Office/Business :: Scheduling",
]
dependencies = [
    "requests>=2.28",
    "python-dotenv>=1.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
lessonbot = "lessonbot.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lessonbot"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
