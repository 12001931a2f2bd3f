"""Location handling: path strings, query strings, and navigation targets."""
