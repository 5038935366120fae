"""Index of published Rust releases."""
