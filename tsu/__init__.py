"""tsu: a small Tk text editor with Pygments syntax highlighting."""

__version__ = "0.1.0"

__all__ = ["__version__"]