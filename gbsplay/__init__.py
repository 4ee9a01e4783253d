"""Game Boy sound player building blocks: subsong logic, status display, output plugins and hardware helpers."""

__version__ = "0.1.0"