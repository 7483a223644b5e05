"""HTTP surface for the setup flow."""
