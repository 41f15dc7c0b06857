"""HTTP service exposing ctorlint validation and autofix."""
