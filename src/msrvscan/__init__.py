"""msrvscan: find the Minimum Supported Rust Version (MSRV) of a Rust crate."""

__version__ = "0.4.0"
