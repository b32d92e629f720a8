"""Click subcommands for the active-branches CLI."""
