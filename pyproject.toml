[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tsu"
version = "0.1.0"
description = "A small Tk text editor with Pygments syntax highlighting and a command palette overlay"
requires-python = ">=3.10"
dependencies = [
    "pygments",
]
keywords = ["editor", "text-editor", "syntax-highlighting", "tkinter", "gui"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Text Editors",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tsu = "tsu.app:main"

[tool.hatch.build.targets.wheel]
packages = ["tsu"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
