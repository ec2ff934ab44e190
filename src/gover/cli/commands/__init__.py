"""Subcommands registered on the gover CLI group."""
