"""CLI subcommands for nextsemver."""
