"""wtf - Wrapper for Terraform.

Transparently work with multiple terraform versions: keep a local store of
binaries, pick the newest one matching the project's constraint, download
missing versions with checksum verification, and run it.
"""

__version__ = "0.4.0"
