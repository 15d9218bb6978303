"""panetap commands. Each module registers its commands on the typer app."""
