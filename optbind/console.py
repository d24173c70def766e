# Optbind Option Parsing — (c) 2025 rtj.dev LLC — MIT Licensed
"""Global console instance for Optbind usage, help and error output."""
from rich.console import Console

console = Console()
