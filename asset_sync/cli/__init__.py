"""
Command-line interface: Typer commands, Rich output and progress display.
"""
