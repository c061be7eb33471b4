"""GUI-agnostic editor core: data model, markup codec, tree store, services."""
