"""Session management for Netgear POE switch web interfaces."""
